import logging

from reptree import DecisionTree
from reptree.utils.logging import configure_logging


def test_configure_logging_writes_file(tmp_path, weather_tree_root):
    log_file = tmp_path / "logs" / "reptree.log"
    package_logger = configure_logging("INFO", log_file=log_file, log_to_console=False)
    try:
        DecisionTree(weather_tree_root).save_txt(tmp_path / "tree.txt")
        for h in package_logger.handlers:
            h.flush()
        assert "Saved tree to" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(package_logger.handlers):
            package_logger.removeHandler(h)
            h.close()
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_replaces_handlers():
    package_logger = configure_logging("DEBUG")
    try:
        configure_logging("DEBUG")
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.DEBUG
    finally:
        for h in list(package_logger.handlers):
            package_logger.removeHandler(h)
        package_logger.setLevel(logging.NOTSET)
