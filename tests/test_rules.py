"""Tests for rule set construction and line matching."""

import pytest

from solidarity.config.schema import Level, MatchMode, RuleConfig, SolidarityConfig
from solidarity.rules.matcher import match, match_rule
from solidarity.rules.ruleset import MatchError, RuleSet, build_ruleset, compile_rule


def _rule(name="master", patterns=("master",), level="warning", mode="word", **kw):
    return RuleConfig(name=name, patterns=list(patterns), level=level, mode=mode, **kw)


def _ruleset(*rules: RuleConfig) -> RuleSet:
    return build_ruleset(SolidarityConfig(rules={r.name: r for r in rules}))


class TestBuildRuleset:
    def test_default_ruleset(self):
        ruleset = build_ruleset(SolidarityConfig())
        names = [r.name for r in ruleset]
        assert names == ["master", "slave", "whitelist", "blacklist"]
        assert all(r.level is Level.WARNING for r in ruleset)

    def test_off_rules_excluded(self):
        ruleset = _ruleset(_rule(), _rule("sanity", ["sanity"], level="off"))
        assert [r.name for r in ruleset] == ["master"]
        assert ruleset.get("sanity") is None

    def test_deterministic(self):
        cfg = SolidarityConfig()
        first, second = build_ruleset(cfg), build_ruleset(cfg)
        assert [(r.name, r.pattern.pattern, r.level) for r in first] == [
            (r.name, r.pattern.pattern, r.level) for r in second
        ]

    def test_typed_fields(self):
        rule = compile_rule(_rule(level="FAILURE", mode="substring", alternatives=["main"]))
        assert rule.level is Level.FAILURE
        assert rule.mode is MatchMode.SUBSTRING
        assert rule.suggestions == ("main",)

    def test_whole_word_alias(self):
        assert compile_rule(_rule(mode="whole-word")).mode is MatchMode.WORD

    def test_several_patterns_become_one_rule(self):
        rule = compile_rule(_rule("dummy", ["dummy", "dummies"]))
        assert [m.text for m in match_rule(rule, "dummy and dummies")] == ["dummy", "dummies"]


class TestRuleValidation:
    def test_invalid_regex(self):
        with pytest.raises(MatchError, match="invalid regular expression") as excinfo:
            compile_rule(_rule(patterns=["master("]))
        assert excinfo.value.rule_name == "master"

    def test_nested_quantifier_rejected(self):
        with pytest.raises(MatchError, match="nested quantifiers"):
            compile_rule(_rule(patterns=["(a+)+b"]))

    def test_overlong_pattern_rejected(self):
        with pytest.raises(MatchError, match="longer than"):
            compile_rule(_rule(patterns=["x" * 300]))

    def test_empty_match_rejected(self):
        with pytest.raises(MatchError, match="empty string"):
            compile_rule(_rule(patterns=["a*"]))

    def test_no_patterns(self):
        with pytest.raises(MatchError, match="no patterns"):
            compile_rule(_rule(patterns=[]))

    def test_unknown_level(self):
        with pytest.raises(MatchError, match="unknown level"):
            compile_rule(_rule(level="critical"))

    def test_unknown_mode(self):
        with pytest.raises(MatchError, match="unknown match mode"):
            compile_rule(_rule(mode="fuzzy"))

    def test_bad_message_template(self):
        with pytest.raises(MatchError, match="bad message template"):
            compile_rule(_rule(message="Avoid {term}"))

    @pytest.mark.parametrize("message", ["{match.foo}", "{rule.upper.bar}"])
    def test_template_field_access_rejected(self, message):
        with pytest.raises(MatchError, match="bad message template"):
            compile_rule(_rule(message=message))

    def test_disabled_rule_still_validated(self):
        with pytest.raises(MatchError):
            _ruleset(_rule(patterns=["("], level="off"))


class TestMatcher:
    def test_whole_word_rejects_longer_word(self):
        ruleset = _ruleset(_rule(mode="word"))
        assert match(ruleset, "what a mastermind") == []

    def test_substring_accepts_longer_word(self):
        ruleset = _ruleset(_rule(mode="substring"))
        [hit] = match(ruleset, "what a mastermind")
        assert (hit.start, hit.end, hit.text) == (7, 13, "master")

    @pytest.mark.parametrize("text", [
        "master_branch = true",
        "git checkout master",
        "MASTER=1",
        "master2",
        "isMaster()",
        "use-master-node",
    ])
    def test_whole_word_hits(self, text):
        assert len(match(_ruleset(_rule()), text)) == 1

    @pytest.mark.parametrize("text", ["mastermind", "remastered", "webmaster", "MASTERY"])
    def test_whole_word_misses(self, text):
        assert match(_ruleset(_rule()), text) == []

    def test_case_insensitive(self):
        [hit] = match(_ruleset(_rule()), "Master Plan")
        assert hit.text == "Master"

    def test_every_occurrence_reported(self):
        hits = match(_ruleset(_rule()), "master, master and master")
        assert [h.start for h in hits] == [0, 8, 19]

    def test_overlapping_rules_both_reported(self):
        ruleset = _ruleset(
            _rule("master", level="warning"),
            _rule("master-notice", level="notice"),
        )
        hits = match(ruleset, "master")
        assert [(h.rule.name, h.start, h.end) for h in hits] == [
            ("master", 0, 6),
            ("master-notice", 0, 6),
        ]

    def test_results_in_rule_order(self):
        ruleset = _ruleset(
            _rule("branch", ["branch"], level="notice", mode="substring"),
            _rule("master"),
        )
        hits = match(ruleset, "master_branch = true")
        assert [h.rule.name for h in hits] == ["branch", "master"]

    def test_longer_alternative_after_glued_span(self):
        hits = match(_ruleset(_rule(patterns=["master", "masters"])), "list the masters here")
        assert [h.text for h in hits] == ["masters"]

    def test_greedy_pattern_backs_off_to_whole_word(self):
        hits = match(_ruleset(_rule("blacklist", [r"black.*list"])), "blacklist and blacklistx")
        assert [(h.start, h.end) for h in hits] == [(0, 9)]

    def test_camel_case_split_on_both_sides(self):
        hits = match(_ruleset(_rule()), "setMasterNode(isMASTER)")
        assert [h.text for h in hits] == ["Master", "MASTER"]

    def test_empty_ruleset(self):
        assert match(RuleSet(), "master slave") == []


class TestRender:
    def test_default_message(self):
        rule = compile_rule(_rule(alternatives=["main", "primary"]))
        assert rule.render("Master") == (
            "Please consider an alternative to `Master`. "
            "Possibilities include: main, primary"
        )

    def test_custom_message(self):
        rule = compile_rule(_rule(message="{rule}: use {suggestions} over {match}", alternatives=["main"]))
        assert rule.render("master") == "master: use main over master"

    def test_no_alternatives(self):
        rule = compile_rule(_rule())
        assert rule.render("master").endswith("none listed")
