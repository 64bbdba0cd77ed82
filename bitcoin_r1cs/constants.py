import pathlib

PACKAGE_DIR = pathlib.Path(__file__).parent
PROJECT_ROOT_DIR = PACKAGE_DIR.parent
