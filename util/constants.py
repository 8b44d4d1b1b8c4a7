class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    ANALYZE = V1 + "/analyze"
    EXPORT_MARKDOWN = V1 + "/export/markdown"
    EXPORT_ANKI = V1 + "/export/anki"


class ExternalURIs:
    UPSTAGE_CHAT = "https://api.upstage.ai/v1/chat/completions"
    UPSTAGE_OCR = "https://api.upstage.ai/v1/document-digitization"
