from review_agenda.models.agenda import Agenda, AgendaItem, AgendaItemMove
from review_agenda.models.document import Document, document_agendas

__all__ = [
    "Agenda",
    "AgendaItem",
    "AgendaItemMove",
    "Document",
    "document_agendas",
]
