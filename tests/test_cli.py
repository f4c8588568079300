import pytest

from histgrep import cli
from histgrep.config import Config
from histgrep.integration import BASH_INTEGRATION

HISTORY = (
    "ls -la\n"
    "#1262305001\n"
    "git status\n"
    "#1262305002\n"
    "git status\n"
    "#1262305003\n"
    "for f in *; do\n"
    "  echo $f\n"
    "done\n"
    "#1262305004\n"
    "git push origin main\n"
)


@pytest.fixture
def histfile(tmp_path):
    path = tmp_path / "bash_history"
    path.write_text(HISTORY)
    return path


def run_main(*argv, environ=None):
    return cli.main(list(argv), config=Config(environ or {}))


def test_batch_prints_all_entries(histfile, capsys):
    assert run_main("-f", str(histfile)) == 0
    out = capsys.readouterr().out
    assert out == (
        "0 2010-01-01 00:00:00 ls -la\n"
        "1 2010-01-01 00:16:41 git status\n"
        "2 2010-01-01 00:16:43 for f in *; do\n  echo $f\ndone\n"
        "3 2010-01-01 00:16:44 git push origin main\n"
    )


def test_batch_without_dedup_keeps_indices_of_full_list(histfile, capsys):
    assert run_main("-f", str(histfile), "--no-dedup", "push") == 0
    assert capsys.readouterr().out == "4 2010-01-01 00:16:44 git push origin main\n"


def test_batch_include_and_exclude(histfile, capsys):
    assert run_main("-f", str(histfile), "--batch", "git", "-e", "push") == 0
    assert capsys.readouterr().out == "1 2010-01-01 00:16:41 git status\n"


def test_batch_regex_and_case(histfile, capsys):
    assert run_main("-f", str(histfile), "/^GIT (status|push)/") == 0
    assert capsys.readouterr().out.count("\n") == 2
    assert run_main("-f", str(histfile), "-s", "/^GIT/") == 0
    assert capsys.readouterr().out == ""


def test_case_sensitivity_from_environment(histfile, capsys):
    assert run_main("-f", str(histfile), "GIT", environ={"HGR_CASE_SENSITIVE": "1"}) == 0
    assert capsys.readouterr().out == ""


def test_histfile_from_environment(histfile, capsys):
    assert run_main("echo", environ={"HISTFILE": str(histfile)}) == 0
    assert capsys.readouterr().out.startswith("2 ")


def test_missing_file(tmp_path, capsys):
    missing = tmp_path / "missing_history"
    assert run_main("-f", str(missing)) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert str(missing) in captured.err


def test_bad_pattern(histfile, capsys):
    assert run_main("-f", str(histfile), "/git[/") == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error parsing pattern `/git[/`" in captured.err


def test_bad_exclude_pattern(histfile, capsys):
    assert run_main("-f", str(histfile), "-e", "/(/") == 1
    assert "Error parsing pattern `/(/`" in capsys.readouterr().err


def test_index_selects_entry(histfile, capsys, clipboard):
    assert run_main("-f", str(histfile), "--index", "2") == 0
    assert capsys.readouterr().out == "for f in *; do\n  echo $f\ndone\n"
    assert clipboard == ["for f in *; do\n  echo $f\ndone"]


def test_index_out_of_range(histfile, capsys, clipboard):
    assert run_main("-f", str(histfile), "-n", "ff") == 1
    err = capsys.readouterr().err
    assert "ff" in err
    assert "maximum valid index is 3" in err
    assert clipboard == []


def test_index_must_be_hex(histfile, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_main("-f", str(histfile), "-n", "xyz")
    assert exc_info.value.code == 2


def test_interactive_selection_is_printed_and_copied(histfile, capsys, clipboard, monkeypatch):
    calls = []

    def fake_run_interactive(entries, initial_search, excludes, case_mode):
        calls.append((entries, initial_search, excludes, case_mode))
        return entries[1]

    monkeypatch.setattr(cli, "run_interactive", fake_run_interactive)
    assert run_main("-f", str(histfile), "-i", "git", "stat", "-e", "push") == 0
    assert capsys.readouterr().out == "git status\n"
    assert clipboard == ["git status"]
    entries, initial_search, excludes, case_mode = calls[0]
    assert len(entries) == 4
    assert initial_search == "git stat"
    assert [p.pattern for p in excludes] == ["push"]
    assert case_mode is cli.CaseMode.INSENSITIVE


def test_interactive_search_words_are_not_compiled(histfile, monkeypatch):
    seen = []
    monkeypatch.setattr(
        cli, "run_interactive", lambda entries, search, excludes, mode: seen.append(search)
    )
    assert run_main("-f", str(histfile), "-i", "/[/") == 0
    assert seen == ["/[/"]


def test_interactive_initial_search_from_environment(histfile, capsys, monkeypatch):
    seen = []
    monkeypatch.setattr(
        cli, "run_interactive", lambda entries, search, excludes, mode: seen.append(search)
    )
    assert run_main("-f", str(histfile), "-i", environ={"HGR_INITIAL_SEARCH": "git p"}) == 0
    assert seen == ["git p"]
    assert capsys.readouterr().out == ""


def test_bash_readline_mode_writes_file(histfile, tmp_path, capsys, clipboard, monkeypatch):
    out_file = tmp_path / "selection"
    monkeypatch.setattr(cli, "run_interactive", lambda entries, *args: entries[2])
    assert run_main("-f", str(histfile), "--bash-readline-mode", str(out_file)) == 0
    assert out_file.read_text() == "for f in *; do\n  echo $f\ndone"
    assert capsys.readouterr().out == ""
    assert clipboard == []


def test_bash_readline_mode_without_selection(histfile, tmp_path, monkeypatch):
    out_file = tmp_path / "selection"
    out_file.write_text("stale")
    monkeypatch.setattr(cli, "run_interactive", lambda *args: None)
    assert run_main("-f", str(histfile), "--bash-readline-mode", str(out_file)) == 0
    assert out_file.read_text() == ""


def test_print_bash_integration(capsys):
    assert run_main("--print-bash-integration") == 0
    out = capsys.readouterr().out
    assert out == BASH_INTEGRATION
    assert "hgr --bash-readline-mode" in out
    assert "bind -m vi-insert -x" in out


def test_hex_index():
    assert cli.hex_index("1a") == 26
    assert cli.hex_index("0x10") == 16
