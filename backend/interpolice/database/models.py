"""
SQLAlchemy ORM Models

This module defines all database tables for the Interpolice system.
Includes models for:
- Reference data (planets, citizen statuses, user roles)
- Users (system operators)
- Citizens (identity registry)
- Citations (minor infractions)
- Criminal records (felony-level history)
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, Date, Time, DateTime, Text, Numeric,
    ForeignKey, Index,
)
from sqlalchemy.orm import Session, relationship
from sqlalchemy.sql import func

from .database import Base


# SQLite only auto-increments INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")


class Planet(Base):
    """Planets of origin, residence and crime location"""
    __tablename__ = "planets"

    id = Column(Integer, primary_key=True)
    planet_name = Column(String(300), nullable=False)


class Status(Base):
    """Citizen life status (DEAD, ALIVE, FROZEN)"""
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True)
    status_name = Column(String(50), nullable=False, unique=True)
    description = Column(String(255))


class Role(Base):
    """Operator roles used for route allow-lists"""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    role_name = Column(String(50), nullable=False, unique=True)


class User(Base):
    """System operator account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey('roles.id'), nullable=False)
    user_email = Column(String(200), nullable=False, unique=True)

    role = relationship("Role", lazy="joined")


class Citizen(Base):
    """
    Citizen under the jurisdiction

    Owned by the registry; citations and criminal records reference it.
    """
    __tablename__ = "citizens"

    id = Column(IdType, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    last_name = Column(String(255))
    nick_name = Column(String(100), unique=True)
    birth_date = Column(Date, nullable=False)

    origin_planet = Column(Integer, ForeignKey('planets.id'), nullable=False)
    residence_planet = Column(Integer, ForeignKey('planets.id'), nullable=False)

    avatar_url = Column(Text, nullable=False, default="")
    qr_code = Column(String(255), nullable=False, unique=True)
    status_id = Column(Integer, ForeignKey('statuses.id'), nullable=False)

    status = relationship("Status", lazy="joined")
    origin = relationship("Planet", foreign_keys=[origin_planet], lazy="joined")
    residence = relationship("Planet", foreign_keys=[residence_planet], lazy="joined")


class Citation(Base):
    """
    Minor infraction

    fine_amount is always assigned by the penalty ladder at filing time.
    """
    __tablename__ = "citations"

    id = Column(IdType, primary_key=True, autoincrement=True)
    citizen_id = Column(IdType, ForeignKey('citizens.id', ondelete='CASCADE'), nullable=False)
    date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False)
    fine_amount = Column(Numeric(10, 2), nullable=False)

    citizen = relationship("Citizen", lazy="joined")

    __table_args__ = (
        Index('idx_citation_citizen_date', 'citizen_id', 'date'),
    )


class CriminalRecord(Base):
    """
    Felony-level event

    Created by direct entry or automatically when citations escalate.
    """
    __tablename__ = "criminal_records"

    id = Column(IdType, primary_key=True, autoincrement=True)
    citizen_id = Column(IdType, ForeignKey('citizens.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location = Column(Integer, ForeignKey('planets.id'), nullable=False)
    description = Column(Text, nullable=False)
    crime_type = Column(String(255), nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    citizen = relationship("Citizen", lazy="joined")
    planet = relationship("Planet", lazy="joined")

    __table_args__ = (
        Index('idx_record_citizen_date', 'citizen_id', 'date'),
    )


REFERENCE_PLANETS = {1: "Earth", 2: "Mars"}
REFERENCE_STATUSES = {1: "DEAD", 2: "ALIVE", 3: "FROZEN"}
REFERENCE_ROLES = {4: "Admin", 5: "Commander", 6: "General", 7: "CourtClerk", 8: "PoliceOfficer"}


def seed_reference_data(session: Session):
    """Insert planets, statuses and roles that are missing (idempotent)"""
    for planet_id, name in REFERENCE_PLANETS.items():
        if session.get(Planet, planet_id) is None:
            session.add(Planet(id=planet_id, planet_name=name))

    for status_id, name in REFERENCE_STATUSES.items():
        if session.get(Status, status_id) is None:
            session.add(Status(id=status_id, status_name=name))

    for role_id, name in REFERENCE_ROLES.items():
        if session.get(Role, role_id) is None:
            session.add(Role(id=role_id, role_name=name))

    session.flush()
