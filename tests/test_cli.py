from __future__ import annotations

from unittest.mock import patch

import pytest

from assistants_cli import cli
from assistants_cli.config import Settings


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as info:
        cli.main(["--version"])
    assert info.value.code == 0
    assert capsys.readouterr().out.startswith("assistants-cli ")


def test_unknown_menu_action_exits_with_config_error(capsys):
    settings = Settings(actions=("list", "teleport"))
    with patch.object(cli.Settings, "from_env", return_value=settings), \
            patch.object(cli, "configure_logging"):
        with pytest.raises(SystemExit) as info:
            cli.main([])
    assert info.value.code == 2


def test_main_builds_menu_from_settings(tmp_path):
    settings = Settings(
        assistant_id="asst_env",
        registry_path=tmp_path / "assistants.json",
        actions=("list", "thread"),
    )
    with patch.object(cli.Settings, "from_env", return_value=settings) as from_env, \
            patch.object(cli, "MenuDispatcher") as dispatcher, \
            patch.object(cli, "configure_logging"):
        cli.main(["--env-file", "custom.env"])

    from_env.assert_called_once_with("custom.env")
    context, actions = dispatcher.call_args.args
    assert context.selected_assistant_id == "asst_env"
    assert context.registry.path == tmp_path / "assistants.json"
    assert [a.key for a in actions] == ["list", "thread"]
    dispatcher.return_value.run.assert_called_once_with()
