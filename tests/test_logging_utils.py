import io
import logging

import pytest
from rich.console import Console

from alist_deployer.logging_utils import configure_logging


@pytest.fixture(autouse=True)
def isolated_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_alist_deployer_configured", "_alist_deployer_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


def test_records_go_to_file_and_console(tmp_path):
    out = io.StringIO()
    log_path = tmp_path / "logs" / "deploy.log"

    chosen = configure_logging(log_path=str(log_path), console=Console(file=out, color_system=None, width=200))
    logging.getLogger("alist_deployer.test").warning("Low disk space: 2GB free")

    assert chosen == str(log_path)
    assert "WARNING alist_deployer.test: Low disk space: 2GB free" in log_path.read_text(encoding="utf-8")
    assert "Low disk space: 2GB free" in out.getvalue()


def test_second_call_keeps_first_handlers(tmp_path):
    first = configure_logging(log_path=str(tmp_path / "a.log"), also_console=False)
    count = len(logging.getLogger().handlers)

    second = configure_logging(log_path=str(tmp_path / "b.log"), also_console=False)

    assert second == first
    assert len(logging.getLogger().handlers) == count
    assert not (tmp_path / "b.log").exists()
