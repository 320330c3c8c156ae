"""Brazilian document and contact formatting helpers"""
import re


def only_digits(value):
    return re.sub(r'\D', '', value or '')


def format_cpf(value):
    digits = only_digits(value)[:11]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f'{digits[:3]}.{digits[3:]}'
    if len(digits) <= 9:
        return f'{digits[:3]}.{digits[3:6]}.{digits[6:]}'
    return f'{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}'


def format_cnpj(value):
    digits = only_digits(value)[:14]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 5:
        return f'{digits[:2]}.{digits[2:]}'
    if len(digits) <= 8:
        return f'{digits[:2]}.{digits[2:5]}.{digits[5:]}'
    if len(digits) <= 12:
        return f'{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:]}'
    return f'{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}'


def format_rg(value):
    digits = only_digits(value)[:9]
    if len(digits) <= 2:
        return digits
    if len(digits) <= 5:
        return f'{digits[:2]}.{digits[2:]}'
    if len(digits) <= 8:
        return f'{digits[:2]}.{digits[2:5]}.{digits[5:]}'
    return f'{digits[:2]}.{digits[2:5]}.{digits[5:8]}-{digits[8:]}'


def format_cep(value):
    digits = only_digits(value)[:8]
    if len(digits) <= 5:
        return digits
    return f'{digits[:5]}-{digits[5:]}'


def format_phone(value):
    digits = only_digits(value)[:11]
    if len(digits) <= 2:
        return f'({digits}' if digits else ''
    if len(digits) <= 6:
        return f'({digits[:2]}) {digits[2:]}'
    if len(digits) <= 10:
        return f'({digits[:2]}) {digits[2:6]}-{digits[6:]}'
    return f'({digits[:2]}) {digits[2:7]}-{digits[7:]}'
