"""
view3d - Main Entry Point

Runs the thumbnail engine headlessly over a folder of glTF models and
reports which previews could be produced.

Usage:
    python -m view3d.main models/
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

from .config import Config
from .core.headless import InMemorySceneGraph
from .services.frame_ticker import FrameTicker
from .services.model_loader import ModelLoader
from .services.thumbnail_service import ThumbnailService
from .utils.logging_config import LoggingConfig
from .utils.path_utils import is_model_file

logger = LoggingConfig.get_logger(__name__)


def collect_model_files(directory: Path, recursive: bool = False) -> List[str]:
    """Model files under directory, sorted for a stable queue order"""
    candidates = directory.rglob('*') if recursive else directory.iterdir()
    return sorted(str(p) for p in candidates if p.is_file() and is_model_file(p))


def setup_application() -> QCoreApplication:
    """
    Get or create the Qt application

    Returns:
        QCoreApplication instance (no GUI needed for the frame loop)
    """
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv)
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    return app


def run(paths: List[str], max_frames: int, settings: Optional[dict] = None) -> int:
    """
    Generate thumbnails for paths until the engine is idle.

    Returns:
        Process exit code: 0 if every thumbnail is ready, 1 otherwise
    """
    app = setup_application()

    service = ThumbnailService(ModelLoader(), InMemorySceneGraph(), settings=settings)
    queued = service.request_many(paths)
    logger.info(f"Queued {queued} model(s)")

    ticker = FrameTicker(service)

    def on_ticked(frame: int):
        if service.is_idle or frame >= max_frames:
            ticker.stop()
            app.quit()

    ticker.ticked.connect(on_ticked)
    ticker.start()
    app.exec()

    stats = service.get_cache_stats()
    logger.info(
        f"Finished after {stats['frame_count']} frame(s): "
        f"{stats['ready_count']} ready, {stats['failed_count']} failed, "
        f"{stats['queued_count'] + stats['rendering_count']} unfinished"
    )
    for path in service.cache:
        state = service.state_of(path)
        if state.error:
            logger.warning(f"{path}: {state.error}")

    return 0 if stats['ready_count'] == queued else 1


def main(argv: Optional[List[str]] = None):
    """
    Main entry point for view3d

    Sets up logging, queues every model in the given folder and runs the
    frame loop until all thumbnails are finished.
    """
    parser = argparse.ArgumentParser(prog=Config.APP_NAME, description="Generate model thumbnails headlessly")
    parser.add_argument('directory', type=Path, help="Folder containing .glb/.gltf files")
    parser.add_argument('-r', '--recursive', action='store_true', help="Search subfolders too")
    parser.add_argument(
        '--max-frames', type=int, default=Config.THUMBNAIL_LOAD_TIMEOUT_TICKS * 10,
        help="Stop after this many frames even if work remains"
    )
    args = parser.parse_args(argv)

    # Setup logging first
    LoggingConfig.setup_logging(Config.get_logs_directory())
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")

    if not args.directory.is_dir():
        logger.error(f"Not a directory: {args.directory}")
        sys.exit(2)

    paths = collect_model_files(args.directory, args.recursive)
    sys.exit(run(paths, args.max_frames))


if __name__ == "__main__":
    main()
