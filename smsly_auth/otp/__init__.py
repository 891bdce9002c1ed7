"""
OTP Challenges
==============
Passcode generation and the stored challenge model.
"""

from .models import OtpChallenge
from .generator import ChallengeGenerator, generate_passcode

__all__ = [
    "OtpChallenge",
    "ChallengeGenerator",
    "generate_passcode",
]
