"""Browser and API test harness for the registration and login flows."""

from signup_suite.config import BrowserSettings, HarnessSettings
from signup_suite.lifecycle import SessionLifecycleManager
from signup_suite.observer import FailureObserver, TestOutcome
from signup_suite.reporting import ReportSink
from signup_suite.sessions import SessionHandle, SessionRegistry

__version__ = "1.0.0"

__all__ = [
    "BrowserSettings",
    "FailureObserver",
    "HarnessSettings",
    "ReportSink",
    "SessionHandle",
    "SessionLifecycleManager",
    "SessionRegistry",
    "TestOutcome",
]
