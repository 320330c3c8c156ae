"""
Project-wide DRF exception handler.

Every error body carries a human-readable ``message`` so API clients can show
a single toast, while field errors from serializers are kept alongside it.
"""
import logging

from rest_framework.views import exception_handler

logger = logging.getLogger('backoffice.api')

DEFAULT_MESSAGES = {
    400: 'Dados inválidos',
    401: 'Token de acesso não fornecido ou inválido',
    403: 'Acesso negado',
    404: 'Registro não encontrado',
    405: 'Método não permitido',
}


def first_message(detail):
    """Pull the first readable string out of a DRF error payload"""
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = first_message(item)
            if message:
                return message
        return None
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = first_message(value)
            if message:
                return message if key in ('detail', 'non_field_errors', 'message') else f'{key}: {message}'
        return None
    return str(detail) if detail else None


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict):
        if 'message' not in data:
            data['message'] = first_message(data) or DEFAULT_MESSAGES.get(response.status_code, 'Erro')
    else:
        response.data = {
            'message': first_message(data) or DEFAULT_MESSAGES.get(response.status_code, 'Erro'),
            'errors': data,
        }

    if response.status_code >= 500:
        logger.error(f"API error on {context.get('view')}: {exc}")
    return response
