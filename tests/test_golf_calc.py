import math

import pytest

import golftrip.golf_calc as gc


# ----------------------------- handicap strokes -----------------------------

def test_concrete_allocation_and_points():
    strokes = gc.strokes_received(10, 7)
    assert strokes == 1
    assert gc.net_score(6, strokes) == 5
    assert gc.stableford_points(6, 4, strokes) == 1


def test_strokes_are_conserved_over_eighteen_holes():
    for h in range(0, 60):
        per_hole = [gc.strokes_received(h, si) for si in range(1, 19)]
        assert sum(per_hole) == h
        assert set(per_hole) <= {h // 18, h // 18 + 1}


def test_extra_strokes_go_to_hardest_holes():
    per_hole = {si: gc.strokes_received(22, si) for si in range(1, 19)}
    assert per_hole[1] == 2
    assert per_hole[4] == 2
    assert per_hole[5] == 1
    assert per_hole[18] == 1


def test_bad_handicaps_receive_no_strokes():
    for value in (None, "", "abc", -4, -0.5, float("nan"), float("inf")):
        assert gc.coerce_handicap(value) == 0
        assert gc.strokes_received(value, 1) == 0


def test_fractional_handicaps_are_rounded():
    assert gc.coerce_handicap(9.4) == 9
    assert gc.coerce_handicap(10.6) == 11
    assert gc.coerce_handicap("12") == 12
    assert gc.coerce_handicap(12.5) == 13
    assert gc.coerce_handicap(11.5) == 12
    assert gc.coerce_handicap(0.5) == 1
    assert gc.strokes_received(17.6, 18) == 1


def test_strokes_received_per_hole_matches_allocation():
    class H:
        def __init__(self, number, stroke_index):
            self.number = number
            self.stroke_index = stroke_index

    holes = [H(n, 19 - n) for n in range(1, 19)]
    received = gc.strokes_received_per_hole(3, holes)
    assert sum(received.values()) == 3
    assert [n for n, s in received.items() if s] == [16, 17, 18]


# ------------------------------- hole scoring -------------------------------

@pytest.mark.parametrize("gross,points", [
    (1, 5), (2, 5), (3, 4), (4, 3), (5, 2), (6, 1), (7, 0), (12, 0),
])
def test_stableford_table_on_a_par_five(gross, points):
    assert gc.stableford_points(gross, 5) == points


def test_stableford_never_increases_as_score_worsens():
    for par in (3, 4, 5):
        for strokes in (0, 1, 2):
            points = [gc.stableford_points(g, par, strokes) for g in range(1, 15)]
            assert points == sorted(points, reverse=True)
            assert min(points) == 0


def test_net_score_never_below_one():
    assert gc.net_score(2, 3) == 1
    assert gc.net_score(1, 1) == 1
    assert gc.net_score(7, 2) == 5


def test_capped_gross():
    assert gc.capped_gross(11, 4, 1) == 11
    assert gc.capped_gross(11, 4, 1, max_over_par=3) == 8
    assert gc.capped_gross(5, 4, 0, max_over_par=3) == 5
    # the cap never moves a hole off zero points
    capped = gc.capped_gross(11, 4, 1, max_over_par=2)
    assert gc.stableford_points(capped, 4, 1) == 0


def test_score_labels_and_to_par_format():
    assert gc.score_label(1, 3) == "hole_in_one"
    assert gc.score_label(2, 5) == "albatross"
    assert gc.score_label(3, 4) == "birdie"
    assert gc.score_label(7, 4) == "worse"
    assert gc.format_to_par(0) == "E"
    assert gc.format_to_par(3) == "+3"
    assert gc.format_to_par(-2) == "-2"


# -------------------------------- betterball --------------------------------

def test_betterball_is_sum_of_per_hole_best():
    p1 = {1: 3, 2: 0, 3: 2, 4: 1}
    p2 = {1: 1, 2: 2, 3: 2, 5: 4}
    result = gc.betterball_total(p1, p2)

    expected = sum(max(p1.get(h, 0), p2.get(h, 0)) for h in set(p1) | set(p2))
    assert result.points == expected == 12
    assert result.holes_played == 5
    assert result.per_hole == {1: 3, 2: 2, 3: 2, 4: 1, 5: 4}


def test_betterball_is_not_the_better_solo_total():
    p1 = {1: 4, 2: 0}
    p2 = {1: 0, 2: 3}
    assert gc.betterball_total(p1, p2).points == 7
    assert max(sum(p1.values()), sum(p2.values())) == 4


def test_zero_points_still_count_as_played():
    result = gc.betterball_total({1: 0}, {1: 0})
    assert result.points == 0
    assert result.holes_played == 1

    empty = gc.betterball_total({}, {})
    assert empty.points == 0
    assert empty.holes_played == 0


def test_better_net_takes_the_lower_score():
    result = gc.better_net_total({1: 5, 2: 4}, {1: 3})
    assert result.per_hole == {1: 3, 2: 4}
    assert result.points == 7


# -------------------------------- match play --------------------------------

def test_match_status_up():
    status = gc.match_status(5, 2, 9)
    assert status == gc.MatchStatus("3UP", "A")


def test_match_status_closed_out():
    status = gc.match_status(7, 1, 14)
    assert status == gc.MatchStatus("6&5", "A")


def test_match_status_all_square():
    assert gc.match_status(4, 4, 12) == gc.MatchStatus("AS", "TIE")
    assert gc.match_status(0, 0, 0) == gc.MatchStatus("AS", "TIE")


def test_match_status_late_in_the_round():
    assert gc.match_status(3, 2, 17).label == "1UP"
    assert gc.match_status(4, 2, 17).label == "2&1"
    assert gc.match_status(2, 3, 18) == gc.MatchStatus("1UP", "B")


def test_match_status_is_symmetric():
    swap = {"A": "B", "B": "A", "TIE": "TIE"}
    for played in range(0, 19):
        for a in range(0, played + 1):
            for b in range(0, played - a + 1):
                s1 = gc.match_status(a, b, played)
                s2 = gc.match_status(b, a, played)
                assert s1.label == s2.label
                assert s2.leader == swap[s1.leader]


def test_hole_winners_counts_unrecorded_side_as_zero():
    a_won, b_won, played = gc.hole_winners({1: 2, 2: 3, 3: 1}, {1: 2, 2: 1, 4: 2})
    assert (a_won, b_won, played) == (2, 1, 4)


# ------------------------------- leaderboards -------------------------------

def entry(key, strokes=0, par=0, holes=0, points=0):
    return gc.LeaderboardEntry(key=key, name=f"P{key}", total_strokes=strokes,
                               par_played=par, holes_completed=holes, points=points)


def keys(ranked):
    return [r.entry.key for r in ranked]


def test_stroke_ranking_by_to_par():
    entries = [entry(1, 40, 36, 9), entry(2, 34, 36, 9), entry(3, 72, 72, 18)]
    ranked = gc.rank_leaderboard(entries, "stroke")
    assert keys(ranked) == [2, 3, 1]
    assert [r.position for r in ranked] == [1, 2, 3]


def test_players_without_holes_sort_last():
    entries = [entry(1), entry(2, 50, 36, 9), entry(3, 20, 18, 4)]
    assert keys(gc.rank_leaderboard(entries, "stroke"))[-1] == 1
    entries = [entry(1, points=0), entry(2, 40, 36, 9, points=5)]
    assert keys(gc.rank_leaderboard(entries, "stableford")) == [2, 1]


def test_level_to_par_ranks_more_holes_first_then_insertion_order():
    entries = [entry(1, 38, 36, 9), entry(2, 74, 72, 18), entry(3, 38, 36, 9)]
    ranked = gc.rank_leaderboard(entries, "stroke")
    assert keys(ranked) == [2, 1, 3]
    assert [r.position for r in ranked] == [1, 2, 2]


def test_stableford_ranking_by_points():
    entries = [entry(1, holes=18, points=30), entry(2, holes=18, points=36),
               entry(3, holes=12, points=30)]
    ranked = gc.rank_leaderboard(entries, "stableford")
    assert keys(ranked) == [2, 3, 1]


def test_ranking_is_idempotent():
    entries = [entry(i, 36 + (i * 7) % 5, 36, 9, points=(i * 3) % 4) for i in range(1, 11)]
    for mode in ("stroke", "stableford"):
        once = gc.rank_leaderboard(entries, mode)
        twice = gc.rank_leaderboard([r.entry for r in once], mode)
        assert once == twice


def test_unknown_ranking_mode():
    with pytest.raises(ValueError):
        gc.rank_leaderboard([], "skins")


def test_combine_entries():
    total = gc.combine_entries(7, "Team", [
        gc.LeaderboardEntry(1, "a", 80, 72, 18, 30, 1),
        gc.LeaderboardEntry(2, "b", 40, 36, 9, 18, 1),
    ])
    assert total.to_par == 12
    assert total.holes_completed == 27
    assert total.points == 48
    assert total.rounds_played == 2
    assert not math.isnan(total.to_par)
