"""Project-wide constants (block size, staging names, environment keys)."""

AGENT_NAME: str = "lfs-folderstore"
AGENT_VERSION: str = "1.0.0"

# 4K is the usual disk block size; copy 16 of them at a time
COPY_BLOCK_SIZE: int = 4096 * 16

TEMP_SUFFIX: str = ".tmp"
DOWNLOAD_STAGING_PARTS: tuple[str, ...] = ("lfs", "tmp")

BASEDIR_ENV: str = "LFS_FOLDERSTORE_BASEDIR"
