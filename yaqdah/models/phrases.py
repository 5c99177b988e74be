# 상태별 고정 문구 및 프롬프트

# Prompts sent to the text model, by state label
INTERVENTION_PROMPTS = {
    "DISTRACTED": "Respond in {language}. Tell the driver to look at the road. Max 3 words.",
    "DROWSY": "Respond in {language}. Warn the driver they are falling asleep. Max 4 words.",
    "ASLEEP": "Respond in {language}. Scream WAKE UP! Max 2 words.",
}

DEFAULT_PROMPT = "Say Hello in {language}."

LANGUAGE_NAMES = {
    "ar": "Arabic",
    "en": "English",
}

# Used whenever the text model is unavailable or fails
FALLBACK_PHRASES = {
    "ar": {
        "ASLEEP": "استيقظ فوراً!",
        "DEFAULT": "الرجاء الانتباه",
    },
    "en": {
        "ASLEEP": "Wake up now!",
        "DEFAULT": "Please pay attention",
    },
}

# Text shown by the presentation layer for session events
STATUS_TEXT = {
    "ar": {
        "ready": "النظام يعمل",
        "sos": "🚨 استيقظ! خطر!",
        "alarm_stopped": "توقف التنبيه",
        "paused": "المراقبة متوقفة مؤقتاً",
        "manual_sos": "تم إرسال نداء الطوارئ",
    },
    "en": {
        "ready": "System running",
        "sos": "🚨 Wake up! Danger!",
        "alarm_stopped": "Alarm stopped",
        "paused": "Monitoring paused",
        "manual_sos": "Emergency alert sent",
    },
}


def language_name(language):
    return LANGUAGE_NAMES.get(language, language)


def fallback_phrase(state_label, language="ar"):
    phrases = FALLBACK_PHRASES.get(language, FALLBACK_PHRASES["en"])
    return phrases.get(state_label, phrases["DEFAULT"])


def status_text(key, language="ar"):
    texts = STATUS_TEXT.get(language, STATUS_TEXT["en"])
    return texts[key]
