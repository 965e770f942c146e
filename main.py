# Main.py
""""" Entry point for Calculator Plus.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load configuration, set up logging and start the Qt GUI

"""""
import sys
import logging
from pathlib import Path
from Modules import config_manager as config_manager


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)


def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.
      In production (.exe) the files are embedded by the bundler and this check is skipped.
    """

    modules_dir = PROJECT_ROOT / "Modules"

    REQUIRED = [
        modules_dir / "UI.py",
        modules_dir / "MathEngine.py",
        modules_dir / "ScientificEngine.py",
        modules_dir / "Expression.py",
        modules_dir / "Session.py",
        modules_dir / "config_manager.py",
        PROJECT_ROOT / "config.json",
        PROJECT_ROOT / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        logger.error("Error 1: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            logger.error("- %s", file_name)
        sys.exit(1)


def setup_logging(all_settings):
    level = logging.DEBUG if all_settings.get("debug") else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", force=True)


def main():

    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_settings()
    setup_logging(all_settings)
    logger.info("Config loaded: %s", all_settings)

    # Imported late so a missing Qt installation is reported after the file check
    from Modules import UI as UI
    UI.main()


if __name__ == "__main__":
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        logging.basicConfig(level=logging.INFO)
        logger.info("Developer Mode: Checking file paths...")
        check_files_exist()
    else:
        logger.info("Production mode (.exe) is starting...")
    main()
