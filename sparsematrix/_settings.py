import os

PARALLEL = bool(int(os.environ.get("SPARSEMATRIX_PARALLEL", "1")))
MAX_WORKERS = int(os.environ.get("SPARSEMATRIX_MAX_WORKERS", "0"))
PARALLEL_THRESHOLD = int(os.environ.get("SPARSEMATRIX_PARALLEL_THRESHOLD", "4096"))
WARN_ON_TOO_DENSE = bool(int(os.environ.get("SPARSEMATRIX_WARN_ON_TOO_DENSE", "0")))
