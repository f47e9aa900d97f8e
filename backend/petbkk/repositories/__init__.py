# Repositories package initialization
# Adapters are imported from their modules (memory_store, *_repo); the
# factory picks one per process.
