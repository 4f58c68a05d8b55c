from .media_cleanup import (
    cleanup_orphaned_media,
    run_media_cleanup,
)

__all__ = [
    'cleanup_orphaned_media',
    'run_media_cleanup',
]
