import pytest

from farol_app.core.settings import ConfigError, FarolSettings, load_settings
from farol_app.core.stages import StageCategory, StageClassification, normalize_stage_name


def test_classification_matching():
    cls = StageClassification.from_mapping({"Doing": ["  Fazendo "], "done": "FEITO", "bogus": ["x"]})
    assert cls.matches("fazendo", StageCategory.DOING)
    assert cls.matches(" Feito", StageCategory.DONE)
    assert not cls.matches("x", StageCategory.DOING)
    assert cls.classify("FAZENDO") is StageCategory.DOING
    assert cls.classify("unknown") is None
    assert cls.category_label(None) == "Other"


def test_classification_legacy_keys_and_blank_aliases():
    cls = StageClassification.from_mapping({"fazendo": ["Fazendo", ""], "aguardando": ["Aguardando"], "feito": []})
    assert cls.aliases[StageCategory.DOING] == frozenset({"fazendo"})
    assert cls.matches("aguardando", StageCategory.WAITING)
    assert not cls.matches("", StageCategory.DOING)
    assert cls.aliases[StageCategory.DONE] == frozenset()


def test_name_in_two_categories_matches_both():
    cls = StageClassification.from_mapping({"doing": ["Review"], "done": ["Review"]})
    assert cls.matches("review", StageCategory.DOING)
    assert cls.matches("review", StageCategory.DONE)
    assert cls.classify("review") is StageCategory.DOING


def test_default_classification_uses_board_lists():
    cls = StageClassification.default()
    assert cls.matches("Fazendo", StageCategory.DOING)
    assert cls.matches("backlog da sprint", StageCategory.BACKLOG)
    assert normalize_stage_name("  FEITO ") == "feito"


def test_settings_from_legacy_mapping():
    settings = FarolSettings.from_mapping(
        {
            "TRELLO_KEY": "k",
            "TRELLO_TOKEN": "t",
            "TRELLO_BOARD_IDS": ["o6b4gZHW"],
            "LISTS": {"fazendo": ["FAZENDO"], "feito": "FEITO"},
            "AGING_DAYS": "5",
            "THROTTLE_MS": 300,
        }
    )
    assert settings.api_key == "k"
    assert settings.board_ids == ("o6b4gZHW",)
    assert settings.aging_days == 5
    assert settings.throttle_ms == 300
    assert settings.max_action_cards is None
    assert settings.classification().matches("feito", StageCategory.DONE)
    settings.validate()


def test_settings_board_ids_from_comma_string():
    settings = FarolSettings.from_mapping({"KEY": "k", "TOKEN": "t", "BOARDS": "a, b,,c"})
    assert settings.board_ids == ("a", "b", "c")


def test_validate_reports_missing_fields():
    with pytest.raises(ConfigError) as exc:
        FarolSettings.from_mapping({"KEY": "k"}).validate()
    assert "TOKEN" in str(exc.value) and "BOARDS" in str(exc.value)


def test_load_settings_from_yaml(tmp_path):
    path = tmp_path / "farol.yaml"
    path.write_text(
        "trello:\n"
        "  KEY: abc\n"
        "  TOKEN: xyz\n"
        "  BOARDS: [b1, b2]\n"
        "  LISTS:\n"
        "    doing: [Doing]\n"
        "    done: [Done]\n"
        "  MAX_ACTION_CARDS: 20\n"
    )
    settings = load_settings(path)
    assert settings.board_ids == ("b1", "b2")
    assert settings.max_action_cards == 20
    assert settings.aging_days == 7
    assert settings.classification().matches("done", StageCategory.DONE)


def test_load_settings_missing_file(tmp_path):
    settings = load_settings(tmp_path / "absent.yaml")
    assert settings == FarolSettings()
    with pytest.raises(ConfigError):
        settings.validate()


def test_load_settings_rejects_non_mapping(tmp_path):
    path = tmp_path / "farol.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_settings(path)


def test_settings_normalize_legacy_list_keys():
    settings = FarolSettings.from_mapping({"LISTS": {"Fazendo": ["FAZENDO"], "aguardando": "ESPERA"}})
    assert settings.stage_aliases["doing"] == ("FAZENDO",)
    assert settings.stage_aliases["waiting"] == ("ESPERA",)
