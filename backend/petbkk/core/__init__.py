# Core package initialization
# This file makes the core directory a Python package.
# Modules are imported explicitly (petbkk.core.config, ...) to keep the
# domain layer free of Flask imports.
