from __future__ import annotations

import io

from tools.newgame.core import logging


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def test_piped_output_has_no_escape_codes(capsys, monkeypatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)

    logging.info("Selected game name: " + logging.highlight("fluffy-dog-game"))
    logging.error("Error: boom")

    captured = capsys.readouterr()
    assert captured.out == "ℹ Selected game name: fluffy-dog-game\n"
    assert captured.err == "❌ Error: boom\n"


def test_terminal_output_is_colored(monkeypatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    terminal = _Terminal()

    logging._write("✅", logging.Color.GREEN, "done", terminal)

    assert terminal.getvalue() == f"{logging.Color.GREEN}✅ done{logging.Color.END}\n"


def test_no_color_disables_terminal_colors(monkeypatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")

    assert logging.use_color(_Terminal()) is False
