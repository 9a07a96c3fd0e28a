"""Prompts sent to the AI gateway for transcription, analysis and Q&A.

Transcripts and answers are in Spanish; the prompts are written in the
diary language so the model does not drift into English.
"""

TRANSCRIPTION_SYSTEM_PROMPT = """Eres un transcriptor de audio profesional. Tu tarea es transcribir el audio proporcionado con la mayor precisión posible.

INSTRUCCIONES:
- Transcribe EXACTAMENTE lo que se dice en el audio, palabra por palabra
- Mantén la puntuación y estructura natural del habla
- Si hay pausas largas, usa puntos suspensivos (...)
- Si no puedes entender algo claramente, usa [inaudible]
- NO añadas comentarios, resúmenes ni interpretaciones
- Responde SOLO con la transcripción literal, nada más
- El idioma es español (España/Latinoamérica)"""

TRANSCRIPTION_USER_PROMPT = "Transcribe este audio de forma literal:"


EVENT_EXTRACTION_PROMPT = """Eres un asistente de diario personal. Analiza la transcripción y extrae SOLO los eventos o citas mencionadas con fechas (si las hay).

Responde SOLO con JSON válido en este formato exacto:
{{
  "events": [
    {{
      "title": "título del evento",
      "date": "YYYY-MM-DD",
      "description": "descripción opcional"
    }}
  ]
}}

Si no hay eventos, devuelve un array vacío para events.
La fecha de hoy es: {today}"""


ASSISTANT_SYSTEM_PROMPT = """Eres un asistente personal que ayuda a analizar el diario de voz del usuario.
Tienes acceso a todas las entradas del diario y eventos registrados.
Responde de forma concisa y útil en español.
Puedes hacer resúmenes, contar días, analizar patrones, buscar información específica, etc.

La fecha de hoy es: {today}

ENTRADAS DEL DIARIO:
{entries_context}

EVENTOS REGISTRADOS:
{events_context}"""

NO_ENTRIES_CONTEXT = "No hay entradas en el diario."
NO_EVENTS_CONTEXT = "No hay eventos registrados."
ASSISTANT_FALLBACK_ANSWER = "No pude procesar tu pregunta."


def build_event_extraction_prompt(today: str) -> str:
    """Return the extraction system prompt anchored at ``today`` (ISO date)."""

    return EVENT_EXTRACTION_PROMPT.format(today=today)


def build_assistant_prompt(today: str, entries_context: str, events_context: str) -> str:
    """Return the assistant system prompt with the diary context inlined."""

    return ASSISTANT_SYSTEM_PROMPT.format(
        today=today,
        entries_context=entries_context or NO_ENTRIES_CONTEXT,
        events_context=events_context or NO_EVENTS_CONTEXT,
    )
