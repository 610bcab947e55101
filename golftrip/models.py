from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .db import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, index=True)
    handicap = Column(Float, nullable=True)  # None -> plays off 0
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    team = relationship("Team", foreign_keys=[team_id], back_populates="players")
    scores = relationship("Score", back_populates="player")
    fines = relationship("Fine", back_populates="player")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # players.team_id and teams.captain_id reference each other
    captain_id = Column(
        Integer,
        ForeignKey("players.id", use_alter=True, name="fk_teams_captain_id"),
        nullable=True,
    )
    logo_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    players = relationship("Player", foreign_keys=[Player.team_id], back_populates="team")
    captain = relationship("Player", foreign_keys=[captain_id], post_update=True)


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    par_total = Column(Integer, nullable=False, default=72)
    description = Column(String, nullable=True)

    holes = relationship(
        "Hole",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Hole.number",
    )

    rounds = relationship("Round", back_populates="course")


class Hole(Base):
    __tablename__ = "holes"
    __table_args__ = (
        UniqueConstraint("course_id", "number", name="uq_holes_course_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)

    number = Column(Integer, nullable=False)        # 1..18
    par = Column(Integer, nullable=False)           # 3/4/5
    stroke_index = Column(Integer, nullable=False)  # 1..18, unique per course
    yardage = Column(Integer, nullable=True)

    course = relationship("Course", back_populates="holes")


class Round(Base):
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    date = Column(Date, nullable=False)
    format = Column(String, nullable=False, default="stroke")  # stroke | betterball
    day = Column(Integer, nullable=True)                        # trip day 1..3
    players = Column(JSON, nullable=False, default=list)        # participant names
    created_at = Column(DateTime, default=datetime.utcnow)

    course = relationship("Course", back_populates="rounds")

    scores = relationship("Score", back_populates="round", cascade="all, delete-orphan")
    matches = relationship("Match", back_populates="round", cascade="all, delete-orphan")
    individual_matches = relationship(
        "IndividualMatch",
        back_populates="round",
        cascade="all, delete-orphan",
    )


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (
        UniqueConstraint("round_id", "player_id", "hole", name="uq_scores_round_player_hole"),
    )

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    hole = Column(Integer, nullable=False)   # 1..18
    gross = Column(Integer, nullable=False)  # strokes taken

    # display / statistics only, never used in scoring
    three_putt = Column(Boolean, nullable=False, default=False)
    picked_up = Column(Boolean, nullable=False, default=False)
    in_water = Column(Boolean, nullable=False, default=False)
    in_bunker = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    round = relationship("Round", back_populates="scores")
    player = relationship("Player", back_populates="scores")


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)

    team_a_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    team_b_id = Column(Integer, ForeignKey("teams.id"), nullable=False)

    pair_a_player1_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    pair_a_player2_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    pair_b_player1_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    pair_b_player2_id = Column(Integer, ForeignKey("players.id"), nullable=False)

    format = Column(String, nullable=False, default="fourball")
    status = Column(String, nullable=False, default="AS")

    round = relationship("Round", back_populates="matches")
    team_a = relationship("Team", foreign_keys=[team_a_id])
    team_b = relationship("Team", foreign_keys=[team_b_id])

    @property
    def player_ids(self):
        return (
            self.pair_a_player1_id,
            self.pair_a_player2_id,
            self.pair_b_player1_id,
            self.pair_b_player2_id,
        )


class IndividualMatch(Base):
    __tablename__ = "individual_matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    player_a_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    player_b_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    status = Column(String, nullable=False, default="AS")

    round = relationship("Round", back_populates="individual_matches")


class Fine(Base):
    __tablename__ = "fines"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    player = relationship("Player", back_populates="fines")


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    activity = Column(String, nullable=False, unique=True)
    count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
