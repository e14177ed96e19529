MAX_DECK_BYTES = 20 * 1024 * 1024  # 20 MiB
MAX_REQUEST_BYTES = MAX_DECK_BYTES + 1024 * 1024  # deck + multipart overhead
CHUNK_SIZE = 1024 * 1024
MAX_ERROR_CHARS = 1200
GENERIC_ANALYSIS_ERROR = "Analysis failed. Please try again."
