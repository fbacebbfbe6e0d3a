"""
Configuration constants for the data intake pipeline.
"""
import os

# --- File Type Definitions ---
IMAGE_EXTS = {'bmp', 'gif', 'heic', 'heif', 'jpeg', 'png', 'svg', 'tiff', 'webp'}
DOCUMENT_EXTS = {'css', 'csv', 'doc', 'docx', 'html', 'pdf', 'txt', 'xlsx'}
TEXT_EXTS = {'css', 'csv', 'html', 'json', 'jsonl', 'svg', 'txt', 'xml'}
ARCHIVE_EXTS = {'zip'}

# --- Staging ---
TEMP_FILE_PREFIX = '__intake_'
RANDOM_NAME_ALPHABET = '1234567890ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz'
RANDOM_NAME_LENGTH = 12

# Exclusive creation is attempted this many times before giving up
TEMP_FILE_ATTEMPTS = 2

# --- Input Limits ---
try:
    MAX_PATH_LENGTH = os.pathconf('/', 'PC_PATH_MAX')
except (AttributeError, OSError, ValueError):
    # Windows (no pathconf) and platforms that do not report a limit
    MAX_PATH_LENGTH = 260 if os.name == 'nt' else 4096

# --- Sniffing ---
# Magic-byte probes never need more than the first 8 KB
SNIFF_HEADER_SIZE = 8 * 1024
# Larger files only have their head checked for text content
TEXT_SNIFF_MAX_BYTES = 1024 * 1024

FALLBACK_EXTENSION = 'bin'
FALLBACK_MIME_TYPE = 'application/octet-stream'

# --- Hashing ---
DEFAULT_HASH_ALGORITHM = 'sha256'
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# Two 2-character bucket directories are sliced from the hash
MINIMUM_HASH_LENGTH = 4
