import logging
from typing import Dict, List, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .exceptions import Conflict, InvalidReference, NotFound
from .fines import get_fine_type, summarize_fines
from .golf_calc import coerce_handicap
from .scoring import (
    CourseInfo,
    HoleInfo,
    IndividualMatchInfo,
    MatchInfo,
    PlayerInfo,
    RoundSnapshot,
    ScoreInfo,
    compute_individual_match_status,
    compute_match_status,
)
from .settings import get_settings

logger = logging.getLogger(__name__)


def _require(db: Session, model, obj_id: int, label: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise NotFound(f"{label} {obj_id} not found")
    return obj


def _reference(db: Session, model, obj_id: Optional[int], label: str):
    if obj_id is None:
        return None
    obj = db.get(model, obj_id)
    if obj is None:
        raise InvalidReference(f"{label} {obj_id} does not exist")
    return obj


#---------------------------------------------------------------------------------
# ---------------------------------- Players -------------------------------------
# --------------------------------------------------------------------------------

def get_players(db: Session):
    return db.query(models.Player).order_by(models.Player.last_name, models.Player.first_name).all()

def get_player(db: Session, player_id: int):
    return db.query(models.Player).filter(models.Player.id == player_id).first()

def create_player(db: Session, data: schemas.PlayerCreate):
    _reference(db, models.Team, data.team_id, "team")
    p = models.Player(**data.model_dump())
    db.add(p)
    db.commit()
    db.refresh(p)
    logger.info("Created player %s (%s)", p.id, p.full_name)
    return p

def update_player(db: Session, player_id: int, data: schemas.PlayerUpdate):
    p = _require(db, models.Player, player_id, "player")
    changes = data.model_dump(exclude_unset=True)
    if "team_id" in changes:
        _reference(db, models.Team, changes["team_id"], "team")
    for k, v in changes.items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p


def _player_matches_query(db: Session, player_id: int):
    return db.query(models.Match).filter(
        or_(
            models.Match.pair_a_player1_id == player_id,
            models.Match.pair_a_player2_id == player_id,
            models.Match.pair_b_player1_id == player_id,
            models.Match.pair_b_player2_id == player_id,
        )
    )

def _player_individual_matches_query(db: Session, player_id: int):
    return db.query(models.IndividualMatch).filter(
        or_(
            models.IndividualMatch.player_a_id == player_id,
            models.IndividualMatch.player_b_id == player_id,
        )
    )

def delete_player(db: Session, player_id: int, policy: Optional[str] = None):
    """
    policy "block": refuse while scores, fines or matches reference the player.
    policy "cascade": delete those records together with the player.
    Captaincies are cleared either way.
    """
    p = _require(db, models.Player, player_id, "player")
    policy = policy or get_settings().player_delete_policy

    dependents = {
        "scores": db.query(models.Score).filter(models.Score.player_id == player_id),
        "fines": db.query(models.Fine).filter(models.Fine.player_id == player_id),
        "matches": _player_matches_query(db, player_id),
        "individual matches": _player_individual_matches_query(db, player_id),
    }

    if policy == "block":
        blocking = [name for name, q in dependents.items() if q.count() > 0]
        if blocking:
            raise Conflict(f"player {player_id} still has {', '.join(blocking)}")
    else:
        for name, q in dependents.items():
            removed = q.delete(synchronize_session=False)
            if removed:
                logger.info("Cascade delete of player %s removed %d %s", player_id, removed, name)

    db.query(models.Team).filter(models.Team.captain_id == player_id).update(
        {models.Team.captain_id: None}, synchronize_session=False
    )
    db.delete(p)
    db.commit()
    logger.info("Deleted player %s", player_id)
    return True


#---------------------------------------------------------------------------------
# ----------------------------------- Teams --------------------------------------
# --------------------------------------------------------------------------------

def get_teams(db: Session):
    return db.query(models.Team).order_by(models.Team.name).all()

def get_team(db: Session, team_id: int):
    return db.query(models.Team).filter(models.Team.id == team_id).first()

def get_team_players(db: Session, team_id: int):
    _require(db, models.Team, team_id, "team")
    return (
        db.query(models.Player)
        .filter(models.Player.team_id == team_id)
        .order_by(models.Player.last_name, models.Player.first_name)
        .all()
    )

def create_team(db: Session, data: schemas.TeamCreate):
    _reference(db, models.Player, data.captain_id, "captain")
    t = models.Team(**data.model_dump())
    db.add(t)
    db.commit()
    db.refresh(t)
    logger.info("Created team %s (%s)", t.id, t.name)
    return t

def update_team(db: Session, team_id: int, data: schemas.TeamUpdate):
    t = _require(db, models.Team, team_id, "team")
    changes = data.model_dump(exclude_unset=True)
    if "captain_id" in changes:
        _reference(db, models.Player, changes["captain_id"], "captain")
    for k, v in changes.items():
        setattr(t, k, v)
    db.commit()
    db.refresh(t)
    return t

def delete_team(db: Session, team_id: int):
    t = _require(db, models.Team, team_id, "team")
    in_matches = db.query(models.Match).filter(
        or_(models.Match.team_a_id == team_id, models.Match.team_b_id == team_id)
    ).count()
    if in_matches:
        raise Conflict(f"team {team_id} is still playing in {in_matches} match(es)")

    # players stay, just without a team
    db.query(models.Player).filter(models.Player.team_id == team_id).update(
        {models.Player.team_id: None}, synchronize_session=False
    )
    db.delete(t)
    db.commit()
    logger.info("Deleted team %s", team_id)
    return True


#---------------------------------------------------------------------------------
# ------------------------------------ Course ------------------------------------
# --------------------------------------------------------------------------------

def get_courses(db: Session):
    return db.query(models.Course).order_by(models.Course.name).all()

def get_course(db: Session, course_id: int):
    return db.query(models.Course).filter(models.Course.id == course_id).first()

def create_course(db: Session, data: schemas.CourseCreate):
    c = models.Course(name=data.name, description=data.description)
    db.add(c)
    db.flush()
    if data.holes:
        _replace_holes(db, c, data.holes)
    db.commit()
    db.refresh(c)
    logger.info("Created course %s (%s)", c.id, c.name)
    return c

def delete_course(db: Session, course_id: int):
    c = _require(db, models.Course, course_id, "course")
    if c.rounds:
        raise Conflict(f"course {course_id} is used by {len(c.rounds)} round(s)")
    db.delete(c)
    db.commit()
    return True


#---------------------------------------------------------------------------------
# ------------------------------------- Holes ------------------------------------
# --------------------------------------------------------------------------------

def get_holes_for_course(db: Session, course_id: int):
    return (
        db.query(models.Hole)
        .filter(models.Hole.course_id == course_id)
        .order_by(models.Hole.number)
        .all()
    )

def _replace_holes(db: Session, course: models.Course, holes_data):
    db.query(models.Hole).filter(models.Hole.course_id == course.id).delete()
    for h in holes_data:
        db.add(models.Hole(course_id=course.id, **h.model_dump()))
    course.par_total = sum(h.par for h in holes_data)

def upsert_holes_for_course(db: Session, course_id: int, holes_data):
    # the whole set of 18 is replaced in one transaction
    c = _require(db, models.Course, course_id, "course")
    _replace_holes(db, c, holes_data)
    db.commit()
    db.refresh(c)
    return c


#---------------------------------------------------------------------------------
# ------------------------------------- Rounds -----------------------------------
# --------------------------------------------------------------------------------

def get_rounds(db: Session):
    return (
        db.query(models.Round)
        .order_by(models.Round.date.asc(), models.Round.id.asc())
        .all()
    )

def get_round(db: Session, round_id: int):
    return db.query(models.Round).filter(models.Round.id == round_id).first()

def get_rounds_by_day(db: Session, day: int):
    return (
        db.query(models.Round)
        .filter(models.Round.day == day)
        .order_by(models.Round.date.asc(), models.Round.id.asc())
        .all()
    )

def create_round(db: Session, data: schemas.RoundCreate):
    _reference(db, models.Course, data.course_id, "course")
    r = models.Round(**data.model_dump())
    db.add(r)
    db.commit()
    db.refresh(r)
    logger.info("Created %s round %s on course %s", r.format, r.id, r.course_id)
    return r

def delete_round(db: Session, round_id: int):
    r = _require(db, models.Round, round_id, "round")
    # scores and matches go with the round (cascade)
    db.delete(r)
    db.commit()
    logger.info("Deleted round %s", round_id)
    return True

def clear_round_scores(db: Session, round_id: int) -> int:
    _require(db, models.Round, round_id, "round")
    removed = db.query(models.Score).filter(models.Score.round_id == round_id).delete()
    db.commit()
    logger.info("Cleared %d score(s) from round %s", removed, round_id)
    return removed


#---------------------------------------------------------------------------------
# ------------------------------------- Scores -----------------------------------
# --------------------------------------------------------------------------------

def get_scores(db: Session, round_id: int):
    return (
        db.query(models.Score)
        .filter(models.Score.round_id == round_id)
        .order_by(models.Score.player_id, models.Score.hole)
        .all()
    )

def get_all_scores(db: Session):
    return (
        db.query(models.Score)
        .order_by(models.Score.round_id, models.Score.player_id, models.Score.hole)
        .all()
    )

def get_score(db: Session, score_id: int):
    return db.query(models.Score).filter(models.Score.id == score_id).first()

def save_score(db: Session, data: schemas.ScoreCreate):
    """Insert or overwrite the score for (round, player, hole)."""
    r = _reference(db, models.Round, data.round_id, "round")
    _reference(db, models.Player, data.player_id, "player")

    hole_exists = (
        db.query(models.Hole)
        .filter(models.Hole.course_id == r.course_id, models.Hole.number == data.hole)
        .first()
    )
    if hole_exists is None:
        raise InvalidReference(f"hole {data.hole} is not on the course of round {r.id}")

    s = (
        db.query(models.Score)
        .filter(
            models.Score.round_id == data.round_id,
            models.Score.player_id == data.player_id,
            models.Score.hole == data.hole,
        )
        .first()
    )
    if s is None:
        s = models.Score(**data.model_dump())
        db.add(s)
    else:
        for k, v in data.model_dump().items():
            setattr(s, k, v)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(
            f"score for player {data.player_id} on hole {data.hole} of round {data.round_id} was written concurrently"
        )
    db.refresh(s)
    return s

def update_score(db: Session, score_id: int, data: schemas.ScoreUpdate):
    s = _require(db, models.Score, score_id, "score")
    for k, v in data.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(s, k, v)
    db.commit()
    db.refresh(s)
    return s


#---------------------------------------------------------------------------------
# ------------------------------------- Matches ----------------------------------
# --------------------------------------------------------------------------------

def get_matches(db: Session, round_id: Optional[int] = None):
    q = db.query(models.Match)
    if round_id is not None:
        q = q.filter(models.Match.round_id == round_id)
    return q.order_by(models.Match.round_id, models.Match.id).all()

def get_match(db: Session, match_id: int):
    return db.query(models.Match).filter(models.Match.id == match_id).first()

def _check_pair(db: Session, team_id: int, player_ids, side: str):
    for pid in player_ids:
        player = _reference(db, models.Player, pid, "player")
        if player.team_id != team_id:
            raise InvalidReference(f"player {pid} in pair {side} is not on team {team_id}")

def _check_match_lineup(db: Session, m):
    _check_pair(db, m.team_a_id, (m.pair_a_player1_id, m.pair_a_player2_id), "A")
    _check_pair(db, m.team_b_id, (m.pair_b_player1_id, m.pair_b_player2_id), "B")

def create_match(db: Session, data: schemas.MatchCreate):
    _reference(db, models.Round, data.round_id, "round")
    _reference(db, models.Team, data.team_a_id, "team")
    _reference(db, models.Team, data.team_b_id, "team")
    _check_match_lineup(db, data)

    m = models.Match(**data.model_dump(), status="AS")
    db.add(m)
    db.commit()
    db.refresh(m)
    logger.info("Created match %s in round %s", m.id, m.round_id)
    return m

def update_match(db: Session, match_id: int, data: schemas.MatchUpdate):
    m = _require(db, models.Match, match_id, "match")
    for k, v in data.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(m, k, v)
    if len(set(m.player_ids)) != 4:
        db.rollback()
        raise InvalidReference("a fourball match needs four different players")
    try:
        _check_match_lineup(db, m)
    except InvalidReference:
        db.rollback()
        raise
    db.commit()
    db.refresh(m)
    return m

def delete_match(db: Session, match_id: int):
    m = _require(db, models.Match, match_id, "match")
    db.delete(m)
    db.commit()
    return True

def get_match_status(db: Session, match_id: int):
    m = _require(db, models.Match, match_id, "match")
    snapshot = load_round_snapshot(db, m.round_id)
    return compute_match_status(snapshot, _match_info(m))

def refresh_match_status(db: Session, match_id: int):
    m = _require(db, models.Match, match_id, "match")
    result = get_match_status(db, match_id)
    if m.status != result.label:
        m.status = result.label
        db.commit()
    return result


def get_individual_matches(db: Session, round_id: int):
    return (
        db.query(models.IndividualMatch)
        .filter(models.IndividualMatch.round_id == round_id)
        .order_by(models.IndividualMatch.id)
        .all()
    )

def create_individual_match(db: Session, data: schemas.IndividualMatchCreate):
    r = _reference(db, models.Round, data.round_id, "round")
    final_day = get_settings().final_day
    if r.day != final_day:
        raise InvalidReference(f"individual matches are only played on day {final_day}")
    _reference(db, models.Player, data.player_a_id, "player")
    _reference(db, models.Player, data.player_b_id, "player")

    m = models.IndividualMatch(**data.model_dump(), status="AS")
    db.add(m)
    db.commit()
    db.refresh(m)
    return m

def get_individual_match_status(db: Session, match_id: int):
    m = _require(db, models.IndividualMatch, match_id, "individual match")
    snapshot = load_round_snapshot(db, m.round_id)
    return compute_individual_match_status(snapshot, _individual_match_info(m))

def refresh_individual_match_status(db: Session, match_id: int):
    m = _require(db, models.IndividualMatch, match_id, "individual match")
    result = get_individual_match_status(db, match_id)
    if m.status != result.label:
        m.status = result.label
        db.commit()
    return result


#---------------------------------------------------------------------------------
# -------------------------------------- Fines -----------------------------------
# --------------------------------------------------------------------------------

def get_fines(db: Session):
    return db.query(models.Fine).order_by(models.Fine.created_at.desc(), models.Fine.id.desc()).all()

def get_fines_for_player(db: Session, player_id: int):
    _require(db, models.Player, player_id, "player")
    return (
        db.query(models.Fine)
        .filter(models.Fine.player_id == player_id)
        .order_by(models.Fine.created_at.desc(), models.Fine.id.desc())
        .all()
    )

def create_fine(db: Session, data: schemas.FineCreate):
    _reference(db, models.Player, data.player_id, "player")
    fine_type = get_fine_type(data.type)
    f = models.Fine(
        player_id=data.player_id,
        type=data.type,
        amount=data.amount if data.amount is not None else fine_type.amount,
        description=data.description if data.description is not None else fine_type.description,
    )
    db.add(f)
    db.commit()
    db.refresh(f)
    logger.info("Fined player %s %d for %s", f.player_id, f.amount, f.type)
    return f

def fines_summary(db: Session):
    names = {p.id: p.full_name for p in get_players(db)}
    return summarize_fines(get_fines(db), names)


#---------------------------------------------------------------------------------
# -------------------------------------- Votes -----------------------------------
# --------------------------------------------------------------------------------

def get_votes(db: Session):
    return db.query(models.Vote).order_by(models.Vote.count.desc(), models.Vote.activity).all()

def _increment_vote(db: Session, activity: str) -> int:
    result = db.execute(
        update(models.Vote)
        .where(models.Vote.activity == activity)
        .values(count=models.Vote.count + 1)
    )
    return result.rowcount

def cast_vote(db: Session, activity: str):
    activity = activity.strip()
    if not _increment_vote(db, activity):
        db.add(models.Vote(activity=activity, count=1))
        try:
            db.commit()
        except IntegrityError:
            # somebody created the row first, count on top of theirs
            db.rollback()
            _increment_vote(db, activity)
            db.commit()
    else:
        db.commit()
    return db.query(models.Vote).filter(models.Vote.activity == activity).one()


#---------------------------------------------------------------------------------
# ------------------------------------ Snapshots ---------------------------------
# --------------------------------------------------------------------------------

def _match_info(m: models.Match) -> MatchInfo:
    return MatchInfo(
        id=m.id,
        team_a_id=m.team_a_id,
        team_b_id=m.team_b_id,
        pair_a=(m.pair_a_player1_id, m.pair_a_player2_id),
        pair_b=(m.pair_b_player1_id, m.pair_b_player2_id),
    )

def _individual_match_info(m: models.IndividualMatch) -> IndividualMatchInfo:
    return IndividualMatchInfo(id=m.id, player_a_id=m.player_a_id, player_b_id=m.player_b_id)

def player_infos(db: Session) -> Dict[int, PlayerInfo]:
    return {
        p.id: PlayerInfo(
            id=p.id,
            name=p.full_name,
            handicap=coerce_handicap(p.handicap),
            team_id=p.team_id,
        )
        for p in get_players(db)
    }

def team_names(db: Session) -> Dict[int, str]:
    return {t.id: t.name for t in get_teams(db)}

def load_round_snapshot(db: Session, round_id: int, players: Optional[Dict[int, PlayerInfo]] = None) -> RoundSnapshot:
    r = _require(db, models.Round, round_id, "round")
    players = players if players is not None else player_infos(db)

    course = CourseInfo(
        id=r.course.id,
        name=r.course.name,
        par_total=r.course.par_total,
        holes=tuple(
            HoleInfo(number=h.number, par=h.par, stroke_index=h.stroke_index, yardage=h.yardage)
            for h in r.course.holes
        ),
    )
    hole_numbers = {h.number for h in course.holes}

    scores = {}
    for s in get_scores(db, round_id):
        if s.hole not in hole_numbers:
            logger.warning("Round %s: skipping score %s on hole %s missing from course %s",
                           round_id, s.id, s.hole, course.id)
            continue
        if s.player_id not in players:
            logger.warning("Round %s: skipping score %s for unknown player %s", round_id, s.id, s.player_id)
            continue
        if s.gross is None or s.gross < 1:
            logger.warning("Round %s: skipping score %s with invalid gross %r", round_id, s.id, s.gross)
            continue
        scores[(s.player_id, s.hole)] = ScoreInfo(
            player_id=s.player_id,
            hole=s.hole,
            gross=s.gross,
            three_putt=bool(s.three_putt),
            picked_up=bool(s.picked_up),
            in_water=bool(s.in_water),
            in_bunker=bool(s.in_bunker),
        )

    # participants: everyone named on the round plus anyone who scored
    names = set(r.players or [])
    participants = [pid for pid, p in players.items() if p.name in names]
    for pid, _ in scores:
        if pid not in participants:
            participants.append(pid)

    matches = []
    for m in r.matches:
        unknown = [pid for pid in m.player_ids if pid not in players]
        if unknown:
            logger.warning("Round %s: match %s references unknown player(s) %s", round_id, m.id, unknown)
        else:
            off_team = [
                pid for pid, team_id in zip(
                    m.player_ids, (m.team_a_id, m.team_a_id, m.team_b_id, m.team_b_id)
                )
                if players[pid].team_id != team_id
            ]
            if off_team:
                logger.warning("Round %s: match %s lists player(s) %s not on their stated team; "
                               "they count as not played", round_id, m.id, off_team)
        matches.append(_match_info(m))

    return RoundSnapshot(
        round_id=r.id,
        course=course,
        players=players,
        scores=scores,
        participant_ids=tuple(participants),
        day=r.day,
        format=r.format,
        max_strokes_over_par=get_settings().max_strokes_over_par,
        matches=tuple(matches),
        individual_matches=tuple(_individual_match_info(m) for m in r.individual_matches),
    )

def load_snapshots(db: Session, rounds: List[models.Round]) -> List[RoundSnapshot]:
    players = player_infos(db)
    return [load_round_snapshot(db, r.id, players) for r in rounds]
