READINESS_PROMPT = "Respond with the single word: READY"
