from fitcoach.core.profile.models import UNIT_METRIC, UserProfile
from fitcoach.core.profile.units import to_metric

TRAINER_PERSONA = (
    "You are a professional fitness trainer with expertise in creating "
    "personalized workout plans and providing nutrition advice. Your tone "
    "should be encouraging, professional, humorous, and tailored to each "
    "individual's specific needs, goals, and fitness level."
)

MEDICAL_INSTRUCTION = (
    "Take into account any medical conditions or injuries when providing advice."
)

CUSTOMIZATION_PROMPT = """Please customize this fitness program template for me based on my profile:

{template}

Please maintain the markdown format but adjust all exercises, sets, reps, and intensity levels according to my profile and goals. Consider my experience level, any medical conditions, and ensure the program aligns with my fitness objectives."""  # noqa: E501


def _num(value: float) -> str:
    return f"{value:g}"


def format_measurements(profile: UserProfile) -> tuple[str, str]:
    """Weight and height as shown to the model, with metric in brackets."""
    if profile.unit_system == UNIT_METRIC:
        return f"{_num(profile.weight)}kg", f"{_num(profile.height)}cm"

    height_cm, weight_kg = to_metric(profile.height, profile.weight, profile.unit_system)
    return (
        f"{_num(profile.weight)}lbs ({_num(weight_kg)}kg)",
        f"{_num(profile.height)}in ({_num(height_cm)}cm)",
    )


def build_system_prompt(profile: UserProfile) -> str:
    """Trainer persona followed by the user's profile."""
    weight, height = format_measurements(profile)
    lines = [
        TRAINER_PERSONA,
        "",
        "User Profile:",
        f"Name: {profile.name}",
        f"Age: {profile.age}",
        f"Weight: {weight}",
        f"Height: {height}",
        f"Sex: {profile.sex}",
        f"Goals: {', '.join(profile.fitness_goals)}",
        f"Experience: {profile.experience_level}",
    ]
    if profile.medical_conditions:
        lines.append(
            f"Medical Conditions & Additional Goals: {profile.medical_conditions}"
        )
    lines += [
        "",
        "Please address the user by their name and tailor all advice to this "
        "specific profile.",
        "When discussing measurements, use their preferred unit system "
        f"({profile.unit_system}).",
    ]
    if profile.medical_conditions:
        lines.append(MEDICAL_INSTRUCTION)
    return "\n".join(lines)


def build_customization_prompt(template: str) -> str:
    return CUSTOMIZATION_PROMPT.format(template=template)
