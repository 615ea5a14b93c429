import logging

import pytest

from pitchside.models import POSITIONS, PlayerRecord, encode_position_history
from pitchside.suggest import (
    DEFAULT_RULES,
    PositionRule,
    analyze_team_needs,
    most_needed_position,
    performance_score,
    suggest_position,
)
from pitchside.suggest.position import experience_rule, history_rule, performance_rule, team_needs_rule


def _player(position: str = "midfielder", *, history: list[str] | None = None, raw_history: str | None = None, **stats) -> PlayerRecord:
    if raw_history is None:
        raw_history = encode_position_history(history or [position])
    return PlayerRecord(
        player_id=stats.pop("player_id", 99),
        name="Subject",
        position=position,
        jersey_number=stats.pop("jersey_number", 99),
        position_history=raw_history,
        **stats,
    )


def _roster(**counts: int) -> list[PlayerRecord]:
    roster: list[PlayerRecord] = []
    for position in POSITIONS:
        for _ in range(counts.get(position, 0)):
            number = len(roster) + 1
            roster.append(PlayerRecord(player_id=number, name=f"P{number}", position=position, jersey_number=number))
    return roster


BALANCED = _roster(goalkeeper=1, defender=4, midfielder=4, forward=2)
FORWARDS_ONLY = _roster(forward=10)


def test_rules_are_ordered():
    assert [rule.name for rule in DEFAULT_RULES] == [
        "performance",
        "experience",
        "team_needs",
        "history",
        "experience_fallback",
        "default",
    ]


def test_performance_dominates_team_needs_and_history():
    player = _player("defender", goals=5, matches_played=1, history=["defender", "defender", "goalkeeper"])
    assert suggest_position(player, FORWARDS_ONLY) == "forward"


def test_assists_make_a_midfielder():
    assert performance_rule(_player("defender", assists=3), []) == "midfielder"


def test_goals_per_match_scenario():
    player = _player("defender", matches_played=10, goals=6, assists=1)
    assert suggest_position(player, BALANCED) == "forward"


@pytest.mark.parametrize(
    ("stats", "expected"),
    [
        ({"matches_played": 6, "goals": 0, "assists": 2}, "midfielder"),
        ({"matches_played": 10, "goals": 0, "assists": 0}, "defender"),
        ({"matches_played": 10, "goals": 1, "assists": 1, "yellow_cards": 1}, None),
        ({"matches_played": 5, "goals": 0, "assists": 0}, None),
    ],
)
def test_experience_rule(stats, expected):
    assert experience_rule(_player("goalkeeper", **stats), []) == expected


def test_team_needs_picks_largest_shortage():
    # Ten forwards: ideal is 1 GK, 4 DF, 4 MF, 2 FW so defender and midfielder tie at 4.
    needs = analyze_team_needs(FORWARDS_ONLY)
    assert needs == {"goalkeeper": 1, "defender": 4, "midfielder": 4, "forward": 0}
    assert most_needed_position(needs) == "defender"
    assert suggest_position(_player("forward"), FORWARDS_ONLY) == "defender"


def test_team_needs_ignores_single_gaps():
    assert analyze_team_needs(BALANCED) == {"goalkeeper": 1, "defender": 1, "midfielder": 1, "forward": 1}
    assert team_needs_rule(_player(), BALANCED) is None


def test_history_frequency_scenario():
    player = _player("midfielder", history=["defender", "defender", "midfielder"])
    assert suggest_position(player, BALANCED) == "defender"


def test_history_tie_goes_to_first_seen():
    assert history_rule(_player("forward", history=["midfielder", "defender"]), []) == "midfielder"


def test_history_tie_goes_to_first_kind_reaching_the_top_count():
    history = ["midfielder", "defender", "defender", "midfielder"]
    assert history_rule(_player("forward", history=history), []) == "defender"


def test_deeply_nested_history_falls_back_to_registered_position(caplog: pytest.LogCaptureFixture):
    player = _player("defender", raw_history="[" * 100000)
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        assert suggest_position(player, BALANCED) == "defender"
    assert "Ignoring position history" in caplog.text


def test_single_entry_history_is_ignored():
    assert history_rule(_player("forward", history=["goalkeeper"]), []) is None


def test_legacy_history_list_is_read():
    player = _player("forward", raw_history='["goalkeeper", "goalkeeper"]')
    assert suggest_position(player, BALANCED) == "goalkeeper"


def test_malformed_history_falls_back_to_registered_position(caplog: pytest.LogCaptureFixture):
    player = _player("goalkeeper", raw_history="[defender,")
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        assert suggest_position(player, BALANCED) == "goalkeeper"
    assert "Ignoring position history" in caplog.text


@pytest.mark.parametrize("position", POSITIONS)
def test_suggestion_is_total_on_empty_roster(position):
    assert suggest_position(_player(position), []) == position


def test_custom_rules_are_respected():
    always_keeper = PositionRule("keeper", lambda player, roster: "goalkeeper")
    assert suggest_position(_player("forward", goals=9), [], rules=(always_keeper,)) == "goalkeeper"
    assert suggest_position(_player("forward"), [], rules=()) == "forward"


def test_performance_score():
    assert performance_score(_player()) == 0.0
    scored = _player(goals=4, assists=2, matches_played=4, yellow_cards=1)
    assert scored.matches_played == 4
    assert performance_score(scored) == pytest.approx(3.0)
    assert performance_score(_player(matches_played=2, red_cards=3)) == 0.0
