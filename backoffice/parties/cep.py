"""
Postal code (CEP) to address lookup

Talks to the public ViaCEP service. Results are cached for a day since a
CEP's address practically never changes.
"""
import logging

import requests
from django.conf import settings
from django.core.cache import cache

from backoffice.core.cache_utils import make_cache_key
from backoffice.core.masks import only_digits

logger = logging.getLogger(__name__)

CEP_CACHE_TTL = 86400  # 1 day


class CepError(Exception):
    message = 'Erro ao buscar CEP. Tente novamente.'


class InvalidCep(CepError):
    message = 'CEP deve conter 8 dígitos'


class CepNotFound(CepError):
    message = 'CEP não encontrado'


class CepLookupFailed(CepError):
    pass


def lookup_cep(cep, session=None):
    """
    Resolve a CEP into ``{cep, rua, bairro, cidade, estado}``.

    Raises InvalidCep for anything but 8 digits, CepNotFound when the service
    does not know the code and CepLookupFailed on transport or payload errors.
    """
    digits = only_digits(cep)
    if len(digits) != 8:
        raise InvalidCep(digits)

    cache_key = make_cache_key('cep', digits)
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    http = session or requests
    url = settings.CEP_LOOKUP_URL.format(cep=digits)
    try:
        response = http.get(url, timeout=settings.CEP_LOOKUP_TIMEOUT)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"CEP lookup failed for {digits}: {str(e)}")
        raise CepLookupFailed(str(e)) from e

    if not isinstance(payload, dict):
        raise CepLookupFailed('Resposta inesperada do serviço de CEP')
    if payload.get('erro'):
        raise CepNotFound(digits)

    address = {
        'cep': digits,
        'rua': payload.get('logradouro', ''),
        'bairro': payload.get('bairro', ''),
        'cidade': payload.get('localidade', ''),
        'estado': payload.get('uf', ''),
    }
    cache.set(cache_key, address, CEP_CACHE_TTL)
    return address
