"""Tests for cricket calculators."""

import pytest


class TestOversNotation:
    """Overs like 4.3 mean four overs and three balls."""

    def test_partial_over(self, ok) -> None:
        out = ok("economy_rate", runs_conceded=30, overs=3.3)
        assert out["balls"] == 21
        assert out["result"] == pytest.approx(8.5714, abs=1e-3)

    def test_more_than_five_balls_rejected(self, calc) -> None:
        result = calc("economy_rate", runs_conceded=30, overs=4.7)
        assert not result.success
        assert result.errors[0]["field"] == "overs"


class TestBatting:
    """Tests for batting_average and strike_rate."""

    def test_batting_average(self, ok) -> None:
        out = ok("batting_average", runs=450, dismissals=10)
        assert out["result"] == pytest.approx(45.0)
        assert out["tier"] == "very-good"

    def test_never_dismissed(self, ok) -> None:
        out = ok("batting_average", runs=80, dismissals=0)
        assert out["result"] == pytest.approx(80.0)
        assert out["not_outs_only"] is True

    def test_strike_rate(self, ok) -> None:
        out = ok("strike_rate", runs=75, balls_faced=50)
        assert out["result"] == pytest.approx(150.0)
        assert out["tier"] == "excellent"

    def test_test_match_bands(self, ok) -> None:
        assert ok("strike_rate", runs=75, balls_faced=50, format="test")["tier"] == "excellent"
        assert ok("strike_rate", runs=25, balls_faced=100, format="test")["tier"] == "poor"

    def test_no_balls_faced(self, ok) -> None:
        assert ok("strike_rate", runs=0, balls_faced=0)["tier"] == "poor"


class TestBowling:
    """Tests for bowling_average and economy_rate."""

    def test_bowling_average_bands_rise_with_average(self, ok) -> None:
        out = ok("bowling_average", runs_conceded=250, wickets=10)
        assert out["result"] == pytest.approx(25.0)
        assert out["tier"] == "good"
        assert ok("bowling_average", runs_conceded=150, wickets=10)["tier"] == "excellent"

    def test_bowling_strike_rate(self, ok) -> None:
        out = ok("bowling_average", runs_conceded=250, wickets=10, overs=40)
        assert out["bowling_strike_rate"] == pytest.approx(24.0)

    def test_economy(self, ok) -> None:
        out = ok("economy_rate", runs_conceded=30, overs=4)
        assert out["result"] == pytest.approx(7.5)
        assert out["tier"] == "good"


class TestFantasyAndIndex:
    """Tests for fantasy_points and player_performance_index."""

    def test_all_round_fantasy(self, ok) -> None:
        out = ok("fantasy_points", runs=50, balls_faced=30, wickets=2, runs_conceded=24, overs=4, catches=1)
        assert out["batting"] == 62
        assert out["bowling"] == 52
        assert out["fielding"] == 8
        assert out["result"] == 122
        assert out["tier"] == "excellent"

    def test_did_not_play(self, ok) -> None:
        out = ok("fantasy_points", runs=0, balls_faced=0, wickets=0, runs_conceded=0, overs=0)
        assert out["result"] == 0

    def test_performance_index_is_bounded(self, ok) -> None:
        out = ok("player_performance_index", runs=200, balls_faced=100, wickets=5, runs_conceded=10,
                 overs=10, catches=20)
        assert 0 <= out["result"] <= 100
        assert out["fielding_index"] == pytest.approx(100.0)


class TestTeamRates:
    """Tests for net_run_rate, required_run_rate and team_run_rate."""

    def test_net_run_rate(self, ok) -> None:
        out = ok("net_run_rate", runs_scored=180, overs_faced=20, runs_conceded=150, overs_bowled=20)
        assert out["result"] == pytest.approx(1.5)
        assert out["tier"] == "excellent"

    def test_net_run_rate_needs_overs(self, calc) -> None:
        result = calc("net_run_rate", runs_scored=180, overs_faced=0, runs_conceded=150, overs_bowled=20)
        assert not result.success
        assert result.errors[0]["field"] == "overs_faced"

    def test_required_run_rate(self, ok) -> None:
        out = ok("required_run_rate", target=180, runs_scored=100, overs_played=12, overs_remaining=8,
                 wickets_lost=3)
        assert out["result"] == pytest.approx(10.0)
        assert out["runs_required"] == 80
        assert out["required_strike_rate"] == pytest.approx(166.6667, abs=1e-3)
        assert out["wickets_in_hand"] == 7
        assert out["tier"] == "below-average"

    def test_no_overs_remaining(self, calc) -> None:
        result = calc("required_run_rate", target=180, runs_scored=100, overs_played=20, overs_remaining=0,
                      wickets_lost=3)
        assert not result.success

    def test_team_run_rate_projection(self, ok) -> None:
        out = ok("team_run_rate", runs=120, overs=15, wickets_lost=2)
        assert out["result"] == pytest.approx(8.0)
        assert out["overs_remaining"] == pytest.approx(5.0)
        assert out["projected_score"] == pytest.approx(160.0)
        assert out["tier"] == "very-good"

    def test_test_match_projects_a_days_play(self, ok) -> None:
        out = ok("team_run_rate", runs=300, overs=100, wickets_lost=4, format="test")
        assert out["overs_remaining"] == pytest.approx(90.0)
        assert out["projected_score"] == pytest.approx(570.0)
