import os
import unittest

from stn.config import NotifierConfig, PostCondition, load_config


class TestPostCondition(unittest.TestCase):
    def test_display_values(self) -> None:
        self.assertIs(PostCondition.parse("Bad Quality Gateway"), PostCondition.ON_BAD_GATE)
        self.assertIs(PostCondition.parse("Good Quality Gateway"), PostCondition.ON_GOOD_GATE)
        self.assertIs(PostCondition.parse("Both"), PostCondition.ALWAYS)

    def test_enum_names_and_aliases(self) -> None:
        self.assertIs(PostCondition.parse("ON_BAD_GATE"), PostCondition.ON_BAD_GATE)
        self.assertIs(PostCondition.parse("on-good-gate"), PostCondition.ON_GOOD_GATE)
        self.assertIs(PostCondition.parse("always-notify"), PostCondition.ALWAYS)

    def test_unset_or_unknown_defaults_to_always(self) -> None:
        self.assertIs(PostCondition.parse(None), PostCondition.ALWAYS)
        self.assertIs(PostCondition.parse(""), PostCondition.ALWAYS)
        self.assertIs(PostCondition.parse("sometimes"), PostCondition.ALWAYS)


class TestLoadConfig(unittest.TestCase):
    def test_maps_settings_and_scanner_properties(self) -> None:
        config = load_config(
            {
                "sonar.teams.enabled": "true",
                "POST_CONDITIONS": "Bad Quality Gateway",
                "show.author": True,
                "REPORTS_METRICS": "coverage, bugs,,code_smells",
            },
            {
                "sonar.teams.hook": "https://hook",
                "sonar.login": "tok",
                "sonar.analysis.projectId": "p1",
                "sonar.host.url": "https://sonar",
                "show.author": "alice",
            },
        )
        self.assertTrue(config.enabled)
        self.assertIs(config.post_condition, PostCondition.ON_BAD_GATE)
        self.assertTrue(config.show_author)
        self.assertEqual(config.author_name, "alice")
        self.assertEqual(config.webhook_url, "https://hook")
        self.assertEqual(config.auth_token, "tok")
        self.assertEqual(config.project_id, "p1")
        self.assertEqual(config.server_url, "https://sonar")
        self.assertEqual(config.tracked_metric_keys, ("coverage", "bugs", "code_smells"))

    def test_defaults(self) -> None:
        config = load_config({}, {})
        self.assertEqual(config, NotifierConfig())
        self.assertFalse(config.enabled)
        self.assertIs(config.post_condition, PostCondition.ALWAYS)
        self.assertFalse(config.has_webhook_url())

    def test_metrics_list_and_false_string(self) -> None:
        config = load_config({"sonar.teams.enabled": "false", "REPORTS_METRICS": ["bugs", "coverage"]}, {})
        self.assertFalse(config.enabled)
        self.assertEqual(config.tracked_metric_keys, ("bugs", "coverage"))

    def test_webhook_env_fallback(self) -> None:
        os.environ["STN_TEST_HOOK"] = "https://from-env"
        try:
            config = load_config({}, {}, webhook_env="STN_TEST_HOOK")
            explicit = load_config({}, {"sonar.teams.hook": "https://explicit"}, webhook_env="STN_TEST_HOOK")
        finally:
            os.environ.pop("STN_TEST_HOOK", None)
        self.assertEqual(config.webhook_url, "https://from-env")
        self.assertEqual(explicit.webhook_url, "https://explicit")

    def test_blank_values_are_not_present(self) -> None:
        config = NotifierConfig(webhook_url="  ", auth_token="")
        self.assertFalse(config.has_webhook_url())
        self.assertFalse(config.has_auth_token())
