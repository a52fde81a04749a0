"""Pre-filled WhatsApp message templates"""

from typing import Optional

from ...config import UNIVERSITY_NAME

SKILL_LEARNING = "skill_learning"
DIRECT_SERVICE = "direct_service"
INTENTS = (SKILL_LEARNING, DIRECT_SERVICE)


def render_skill_learning(
    provider_name: str,
    requester_name: str,
    skill_title: str,
    available_for_learning: bool,
) -> str:
    if available_for_learning:
        ask = (
            "I saw that you're available for teaching. Could you please share more details about:\n"
            "- Training schedule and duration\n"
            "- Learning approach and materials\n"
            "- Pricing for the training sessions"
        )
    else:
        ask = "Could you please let me know if you're available to teach this skill?"

    return (
        f"Hi {provider_name}! 👋\n\n"
        f"I'm {requester_name}, a student at {UNIVERSITY_NAME}. I found your profile on TalentNest "
        f'and I\'m interested in learning "{skill_title}".\n\n'
        f"{ask}\n\n"
        "I'm looking forward to learning from your expertise!\n\n"
        f"Best regards,\n{requester_name}\n{UNIVERSITY_NAME} Student"
    )


def render_direct_service(
    provider_name: str,
    requester_name: str,
    skills: Optional[list[str]] = None,
    booking_title: Optional[str] = None,
) -> str:
    if booking_title:
        interest = f'my booking for "{booking_title}"'
    elif skills:
        interest = f"your {', '.join(skills)} services"
    else:
        interest = "your services"

    return (
        f"Hi {provider_name}! 👋\n\n"
        f"I'm {requester_name}, a student at {UNIVERSITY_NAME}. I found your profile on TalentNest "
        f"and I'm reaching out about {interest}.\n\n"
        "Could you please share more details about:\n"
        "- Your availability\n"
        "- Service offerings\n"
        "- Pricing and timeline\n\n"
        "Looking forward to working with you!\n\n"
        f"Best regards,\n{requester_name}\n{UNIVERSITY_NAME} Student"
    )
