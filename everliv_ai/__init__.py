"""EVERLIV AI analysis service: DeepSeek blood-test interpretation with validated, fail-soft results."""
