"""Explicit wiring of the service graph for one process"""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import async_sessionmaker

from scholarlink.services.notification_center import NotificationCenter
from scholarlink.services.session_lifecycle import SessionLifecycleCoordinator
from scholarlink.services.session_store import SessionStore
from scholarlink.services.user_directory import UserDirectory


@dataclass
class ServiceContainer:
    session_factory: async_sessionmaker
    users: UserDirectory
    sessions: SessionStore
    notifications: NotificationCenter
    coordinator: SessionLifecycleCoordinator


def build_services(session_factory: async_sessionmaker) -> ServiceContainer:
    """Construct every service once, sharing a single coordinator lock"""
    users = UserDirectory(session_factory)
    sessions = SessionStore(session_factory)
    notifications = NotificationCenter(session_factory)
    coordinator = SessionLifecycleCoordinator(
        session_factory,
        users=users,
        sessions=sessions,
        notifications=notifications,
    )
    return ServiceContainer(
        session_factory=session_factory,
        users=users,
        sessions=sessions,
        notifications=notifications,
        coordinator=coordinator,
    )
