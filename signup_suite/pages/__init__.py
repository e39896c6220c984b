from signup_suite.pages.base import ActionError, BasePage
from signup_suite.pages.home import HomePage
from signup_suite.pages.login import LoginPage
from signup_suite.pages.registration import RegistrationPage

__all__ = ["ActionError", "BasePage", "HomePage", "LoginPage", "RegistrationPage"]
