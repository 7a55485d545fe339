from app.config import FAIL_THRESHOLD, REVIEW_THRESHOLD

STATUS_MESSAGES = {
    "PASS": "No significant plagiarism detected. Code appears to be original.",
    "REVIEW": "Moderate similarity detected. Manual review recommended.",
    "FAIL": "High similarity detected. This code appears to be plagiarized.",
}

BASIC_STATUS_MESSAGES = {
    "PASS": "No significant plagiarism detected (basic analysis).",
    "REVIEW": "Moderate similarity detected (basic analysis). Manual review recommended.",
    "FAIL": "High similarity detected (basic analysis). This code may be plagiarized.",
}

FALLBACK_NOTE = " (Note: AI analysis unavailable, using basic detection)"


def clamp_similarity(value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if v != v:  # NaN
        return 0.0
    return min(max(v, 0.0), 1.0)


def derive_status(similarity: float) -> str:
    """PASS below 0.5, REVIEW from 0.5 to 0.7 inclusive, FAIL above 0.7."""
    if similarity > FAIL_THRESHOLD:
        return "FAIL"
    if similarity >= REVIEW_THRESHOLD:
        return "REVIEW"
    return "PASS"


def is_plagiarized(status: str) -> bool:
    return status != "PASS"
