"""
Service contract documents

``assemble_contract`` turns the data of one event into a document definition
(an ordered list of styled blocks) using one of two templates: the party
contract for individuals and the corporate contract for companies. It does
no I/O and has no error path: absent optional data leaves the matching text
blank or omitted.

``render_contract_pdf`` lays a definition out as an A4 PDF with reportlab.
"""
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from backoffice.core.masks import format_cnpj, format_cpf, format_phone, format_rg

logger = logging.getLogger(__name__)

INDIVIDUAL = 'fisica'
CORPORATE = 'juridica'

DEFAULT_DURATION_HOURS = 3
DEFAULT_CHILDREN = 15
MARGIN = 60

MONTHS_PT = [
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
]

UNITS_PT = [
    'zero', 'um', 'dois', 'três', 'quatro', 'cinco', 'seis', 'sete', 'oito', 'nove',
    'dez', 'onze', 'doze', 'treze', 'quatorze', 'quinze', 'dezesseis', 'dezessete',
    'dezoito', 'dezenove', 'vinte',
]


@dataclass
class ContractData:
    """Everything a contract needs to know about one event"""
    event_title: str
    client_name: str
    event_date: datetime
    location: str = ''
    contract_value: Decimal = Decimal('0')
    event_time: str = ''
    event_end_time: str = ''
    duration_hours: Optional[Decimal] = None
    client_person_type: str = INDIVIDUAL
    client_cpf: str = ''
    client_rg: str = ''
    client_cnpj: str = ''
    client_phone: str = ''
    client_email: str = ''
    client_rua: str = ''
    client_numero: str = ''
    client_bairro: str = ''
    client_cidade: str = ''
    client_estado: str = ''
    client_responsible_name: str = ''
    client_responsible_role: str = ''
    package: str = ''
    package_notes: str = ''
    characters: List[str] = field(default_factory=list)
    employees: List[str] = field(default_factory=list)
    estimated_children: Optional[int] = None
    entry_value: Optional[Decimal] = None
    installments: Optional[int] = None

    @classmethod
    def from_event(cls, event):
        client = event.client
        local = timezone.localtime(event.date) if timezone.is_aware(event.date) else event.date
        return cls(
            event_title=event.title,
            client_name=client.name,
            event_date=local,
            event_time=local.strftime('%H:%M'),
            event_end_time=event.end_time.strftime('%H:%M') if event.end_time else '',
            duration_hours=event.duration_hours,
            location=event.location,
            contract_value=event.contract_value,
            client_person_type=client.person_type,
            client_cpf=format_cpf(client.cpf),
            client_rg=format_rg(client.rg),
            client_cnpj=format_cnpj(client.cnpj),
            client_phone=format_phone(client.phone),
            client_email=client.email,
            client_rua=client.rua,
            client_numero=client.numero,
            client_bairro=client.bairro,
            client_cidade=client.cidade,
            client_estado=client.estado,
            client_responsible_name=client.responsible_name,
            client_responsible_role=client.responsible_role,
            package=event.package.name if event.package_id else '',
            package_notes=event.package_notes,
            characters=[character.name for character in event.characters.all()],
            employees=[assignment.employee.name for assignment in event.event_employees.select_related('employee')],
            estimated_children=event.estimated_children,
            entry_value=event.entry_value,
            installments=event.installments,
        )


@dataclass
class Block:
    """
    One piece of the document.

    ``style`` is one of ``header``, ``section``, ``clause`` (bold ``label``
    followed by ``text``), ``paragraph``, ``bullets`` (``items``) or
    ``signature``.
    """
    style: str
    text: str = ''
    label: str = ''
    items: List[str] = field(default_factory=list)


@dataclass
class DocumentDefinition:
    kind: str
    title: str
    client_name: str
    event_date: date
    contract_date: date
    start_time: str
    end_time: str
    duration_hours: Decimal
    installment_count: int
    installment_amount: Decimal
    blocks: List[Block] = field(default_factory=list)
    page_size: str = 'A4'
    margins: tuple = (MARGIN, MARGIN, MARGIN, MARGIN)

    def text(self):
        """Plain text of the whole document, one block per line"""
        lines = []
        for block in self.blocks:
            if block.style == 'bullets':
                lines.extend(f'- {item}' for item in block.items)
            else:
                lines.append(f'{block.label}{block.text}')
        return '\n'.join(lines)


def number_to_words_pt(number):
    """Portuguese cardinal for 0..49; larger numbers are returned as digits"""
    if number < 0:
        return str(number)
    if number <= 20:
        return UNITS_PT[number]
    tens, unit = divmod(number, 10)
    if tens == 2:
        return f'vinte e {UNITS_PT[unit]}'
    if tens == 3:
        return f'trinta e {UNITS_PT[unit]}' if unit else 'trinta'
    if tens == 4:
        return f'quarenta e {UNITS_PT[unit]}' if unit else 'quarenta'
    return str(number)


def format_long_date(value):
    """``05 de março de 2026``"""
    return f'{value.day:02d} de {MONTHS_PT[value.month - 1]} de {value.year}'


def format_currency(value):
    """``R$ 1.234,56``"""
    amount = _decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    text = f'{amount:,.2f}'.replace(',', '_').replace('.', ',').replace('_', '.')
    return f'R$ {text}'


def _decimal(value):
    if value in (None, ''):
        return Decimal('0')
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal('0')


def end_time_for(start_time, duration_hours=None):
    """Start time plus the duration (3 h when missing), wrapping past midnight"""
    duration = _decimal(duration_hours) or Decimal(DEFAULT_DURATION_HOURS)
    parts = (start_time or '00:00').split(':')
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        hours, minutes = 0, 0
    total = hours * 60 + minutes + int((duration * 60).to_integral_value(rounding=ROUND_HALF_UP))
    end_hours, end_minutes = divmod(total % (24 * 60), 60)
    return f'{end_hours:02d}:{end_minutes:02d}'


def installment_amount_for(contract_value, entry_value=None, installments=None):
    count = installments if installments and installments > 0 else 1
    remaining = _decimal(contract_value) - _decimal(entry_value)
    return count, (remaining / count).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _format_hours(value):
    value = _decimal(value) or Decimal(DEFAULT_DURATION_HOURS)
    return str(int(value)) if value == value.to_integral_value() else str(value).replace('.', ',')


def _payment_terms(data, installment_count, installment_amount):
    """Entry and installment paragraph, omitted when nothing was agreed"""
    entry = _decimal(data.entry_value)
    if not entry and installment_count <= 1:
        return None
    parts = []
    if entry:
        parts.append(f'entrada de {format_currency(entry)}')
    if installment_count > 1:
        parts.append(f'saldo em {installment_count} parcelas de {format_currency(installment_amount)}')
    else:
        parts.append(f'saldo de {format_currency(installment_amount)}')
    return 'Condição acordada: ' + ' e '.join(parts) + '.'


def _contractor_line(contractor):
    return (
        f"{contractor['name']}, empresária individual, inscrita no CNPJ sob o nº {contractor['document']}, "
        f"com sede na {contractor['address']}, endereço eletrônico {contractor['email']}, "
        f"contato {contractor['phone']}."
    )


def _signature(contractor, contract_date):
    return [
        Block('paragraph', f"{contractor['city']}, {format_long_date(contract_date)}."),
        Block('signature', '_________________________________________'),
        Block('signature', contractor['name']),
        Block('signature', 'CONTRATADA'),
    ]


def _party_blocks(data, context, contractor):
    identity = ''.join([
        data.client_name,
        f', CPF: {data.client_cpf}' if data.client_cpf else '',
        f', RG: {data.client_rg}' if data.client_rg else '',
        f', residente à {data.client_rua}' if data.client_rua else '',
        f', nº {data.client_numero}' if data.client_numero else '',
        f', {data.client_bairro}' if data.client_bairro else '',
        f', {data.client_cidade}' if data.client_cidade else '',
        f'/{data.client_estado}' if data.client_estado else '',
        f', telefone: {data.client_phone}' if data.client_phone else '',
        '.',
    ])
    characters = data.characters
    character_line = (
        f"{len(characters)} personage{'ns caracterizados' if len(characters) > 1 else 'm caracterizado'}: "
        f"{', '.join(characters)};"
    )
    children = data.estimated_children or DEFAULT_CHILDREN

    blocks = [
        Block('header', 'CONTRATO DE PRESTAÇÃO DE SERVIÇOS DE RECREAÇÃO E PERSONAGENS PARA FESTA INFANTIL'),
        Block('section', 'IDENTIFICAÇÃO DAS PARTES CONTRATANTES'),
        Block('clause', identity, label='CONTRATANTE: '),
        Block('clause', _contractor_line(contractor), label='CONTRATADA: '),
        Block('section', 'OBJETO DO CONTRATO'),
        Block('clause', f"O presente contrato refere-se ao {data.package or 'Pacote Colors'}, "
                        'conforme condições previamente acordadas entre as partes.', label='Cláusula 1ª. '),
        Block('paragraph', 'Estão inclusos no pacote os seguintes serviços:'),
        Block('bullets', items=[
            character_line,
            'Apresentação musical temática com ambientação sonora;',
            'Dança e interação com as crianças ao longo do evento;',
            'Pintura artística e escultura em bexiga realizadas pelos produtores;',
            'Retomada do entretenimento e condução do momento do parabéns;',
        ]),
        Block('section', 'DA FESTA'),
        Block('clause', f"A festa será realizada em {format_long_date(context['event_date'])}, "
                        f"às {context['start_time']}, em {data.location}.", label='Cláusula 2ª. '),
        Block('clause', f"O serviço de recreação terá início às {context['start_time']} e término às "
                        f"{context['end_time']}.", label='Cláusula 3ª. '),
        Block('clause', 'Atrasos por parte do CONTRATANTE não acarretarão prorrogação do serviço. Caso o atraso '
                        'seja da CONTRATADA, esta deverá compensar o tempo com acréscimo de até 15 minutos ao '
                        'final do evento.', label='Parágrafo único. '),
        Block('clause', f'Estima-se participação de {children} ({number_to_words_pt(children)}) crianças. '
                        'Caso o número exceda, será cobrado adicional por criança.', label='Cláusula 4ª. '),
        Block('section', 'DAS OBRIGAÇÕES DO CONTRATANTE'),
        Block('clause', 'É responsabilidade do CONTRATANTE assegurar à CONTRATADA:', label='Cláusula 5ª. '),
        Block('bullets', items=[
            'Disponibilidade de energia elétrica e iluminação adequadas;',
            'Espaço físico apropriado para a realização das atividades recreativas;',
            'Sistema de som para reprodução das músicas fornecidas pela CONTRATADA.',
        ]),
        Block('clause', 'Para eventos realizados em condomínios ou locais com portaria, o CONTRATANTE '
                        'compromete-se a providenciar autorização prévia para acesso da equipe da CONTRATADA.',
              label='Cláusula 6ª. '),
        Block('section', 'VALORES E CONDIÇÕES DE PAGAMENTO'),
        Block('clause', f"O valor total dos serviços é de {format_currency(data.contract_value)}, sendo pago o "
                        'valor mínimo de 30% do valor do contrato como entrada.', label='Cláusula 7ª. '),
    ]
    terms = _payment_terms(data, context['installment_count'], context['installment_amount'])
    if terms:
        blocks.append(Block('paragraph', terms))
    blocks += [
        Block('clause', 'O saldo remanescente deverá ser quitado até 5 (cinco) dias antes da data do evento.',
              label='Parágrafo único. '),
        Block('section', 'DISPOSIÇÕES GERAIS'),
        Block('clause', 'O presente contrato passa a vigorar a partir do pagamento da entrada, dispensando a '
                        'necessidade de assinatura física.', label='Cláusula 8ª. '),
        Block('clause', f"Para solução de quaisquer controvérsias oriundas deste contrato, fica eleito o foro da "
                        f"comarca de {contractor['city']}.", label='Cláusula 9ª. '),
    ]
    return blocks + _signature(contractor, context['contract_date'])


def _corporate_blocks(data, context, contractor):
    address = ', '.join(part for part in [
        data.client_rua,
        f'nº {data.client_numero}' if data.client_numero else '',
        f'no Bairro {data.client_bairro}' if data.client_bairro else '',
        f'em {data.client_cidade}/{data.client_estado}' if data.client_cidade and data.client_estado else '',
    ] if part)
    identity = ''.join([
        data.client_name,
        f' inscrito no CNPJ sob o nº {data.client_cnpj}' if data.client_cnpj else '',
        f' com sede em {address}' if address else '',
        f' endereço eletrônico {data.client_email}' if data.client_email else '',
        f' telefone {data.client_phone}' if data.client_phone else '',
        f', neste ato representado por {data.client_responsible_name}' if data.client_responsible_name else '',
        f' ({data.client_responsible_role})' if data.client_responsible_name and data.client_responsible_role else '',
        '.',
    ])
    staff_count = len(data.employees) or 1
    staff_text = f'{staff_count} produtores' if staff_count > 1 else '1 produtor'
    headline = (data.event_title or 'Evento Corporativo') + (f' - {data.package_notes}' if data.package_notes else '')

    blocks = [
        Block('header', 'CONTRATO DE PRESTAÇÃO DE SERVIÇO DE RECREAÇÃO EM EVENTO CORPORATIVO'),
        Block('section', 'IDENTIFICAÇÃO DAS PARTES CONTRATANTES'),
        Block('clause', identity, label='CONTRATANTE: '),
        Block('clause', _contractor_line(contractor), label='CONTRATADA: '),
        Block('section', 'OBJETO DO CONTRATO'),
        Block('clause', 'O objeto do presente contrato é a prestação de serviços de recreação, consistindo na '
                        'ANIMAÇÃO DE EVENTO CORPORATIVO PARTICULAR.', label='Cláusula 1ª. '),
        Block('paragraph', headline),
        Block('paragraph', f"Com {staff_text} para executar a atividade, com duração de "
                           f"{_format_hours(context['duration_hours'])} horas (com 1 pausa de 15 minutos)."),
        Block('section', 'DO EVENTO CORPORATIVO'),
        Block('clause', f"O Evento Corporativo será realizado no dia {format_long_date(context['event_date'])} às "
                        f"{context['start_time']} horas, em {data.location}.", label='Cláusula 2ª. '),
        Block('clause', f"A recreação terá início às {context['start_time']} horas, encerrando-se às "
                        f"{context['end_time']} horas.", label='Cláusula 3ª. '),
        Block('section', 'DAS OBRIGAÇÕES DO CONTRATANTE'),
        Block('clause', 'O(a) CONTRATANTE compromete-se a manter à disposição da CONTRATADA todos os meios '
                        'necessários para execução dos serviços.', label='Cláusula 4ª. '),
        Block('section', 'VALOR E CONDIÇÕES DE PAGAMENTO'),
        Block('clause', f"O presente serviço será remunerado pela quantia de {format_currency(data.contract_value)}, "
                        'devendo ser pago a título de reserva da data no ato da assinatura o percentual de 30% '
                        f"(trinta por cento) do valor do contrato, por pix no CNPJ: {contractor['document']}.",
              label='Cláusula 5ª. '),
    ]
    terms = _payment_terms(data, context['installment_count'], context['installment_amount'])
    if terms:
        blocks.append(Block('paragraph', terms))
    blocks += [
        Block('section', 'CONDIÇÕES GERAIS'),
        Block('clause', 'Fica compactuada entre as partes a total inexistência de vínculo trabalhista.',
              label='Cláusula 6ª. '),
        Block('clause', f"Para dirimir quaisquer controvérsias oriundas do presente contrato, as partes elegem o "
                        f"foro da comarca de {contractor['city']}.", label='Cláusula 7ª. '),
        Block('paragraph', 'Por estarem assim justos e contratados, firmam o presente instrumento, em duas vias '
                           'de igual teor.'),
    ]
    return blocks + _signature(contractor, context['contract_date'])


def assemble_contract(data, client_kind=None, today=None, contractor=None):
    """
    Build the contract for ``data``.

    ``client_kind`` forces the template (``fisica`` or ``juridica``); when
    omitted the client's own person type decides.
    """
    kind = client_kind or data.client_person_type
    kind = CORPORATE if kind == CORPORATE else INDIVIDUAL
    contractor = contractor or settings.CONTRACTOR
    contract_date = today or timezone.localdate()

    event_date = data.event_date.date() if isinstance(data.event_date, datetime) else data.event_date
    start_time = data.event_time or '00:00'
    duration = _decimal(data.duration_hours) or Decimal(DEFAULT_DURATION_HOURS)
    count, amount = installment_amount_for(data.contract_value, data.entry_value, data.installments)
    context = {
        'event_date': event_date,
        'contract_date': contract_date,
        'start_time': start_time,
        'end_time': data.event_end_time or end_time_for(start_time, duration),
        'duration_hours': duration,
        'installment_count': count,
        'installment_amount': amount,
    }

    build = _corporate_blocks if kind == CORPORATE else _party_blocks
    blocks = build(data, context, contractor)
    return DocumentDefinition(
        kind=kind,
        title=blocks[0].text,
        client_name=data.client_name,
        event_date=event_date,
        contract_date=contract_date,
        start_time=start_time,
        end_time=context['end_time'],
        duration_hours=duration,
        installment_count=count,
        installment_amount=amount,
        blocks=blocks,
    )


def contract_filename(definition):
    prefix = 'Contrato-Corporativo' if definition.kind == CORPORATE else 'Contrato'
    return f'{prefix}-{definition.client_name}-{format_long_date(definition.event_date)}.pdf'


def render_contract_pdf(definition):
    """Lay out ``definition`` as an A4 PDF and return its bytes"""
    buffer = io.BytesIO()
    left, top, right, bottom = definition.margins
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=left,
        topMargin=top,
        rightMargin=right,
        bottomMargin=bottom,
        title=definition.title,
    )

    styles = getSampleStyleSheet()
    body_style = ParagraphStyle('ContractBody', parent=styles['Normal'], fontSize=10, leading=14,
                                alignment=TA_JUSTIFY, spaceAfter=8)
    header_style = ParagraphStyle('ContractHeader', parent=body_style, fontName='Helvetica-Bold',
                                  fontSize=14, leading=18, alignment=TA_CENTER, spaceAfter=20)
    section_style = ParagraphStyle('ContractSection', parent=body_style, fontName='Helvetica-Bold',
                                   fontSize=12, alignment=TA_CENTER, spaceBefore=14, spaceAfter=10)
    signature_style = ParagraphStyle('ContractSignature', parent=body_style, alignment=TA_CENTER, spaceAfter=2)

    story = []
    for block in definition.blocks:
        if block.style == 'header':
            story.append(Paragraph(escape(block.text), header_style))
        elif block.style == 'section':
            story.append(Paragraph(escape(block.text), section_style))
        elif block.style == 'clause':
            story.append(Paragraph(f'<b>{escape(block.label)}</b>{escape(block.text)}', body_style))
        elif block.style == 'bullets':
            story.append(ListFlowable(
                [ListItem(Paragraph(escape(item), body_style), leftIndent=20) for item in block.items],
                bulletType='bullet',
                leftIndent=20,
            ))
        elif block.style == 'signature':
            if block.text.startswith('_'):
                story.append(Spacer(1, 30))
            story.append(Paragraph(escape(block.text), signature_style))
        else:
            story.append(Paragraph(escape(block.text), body_style))

    doc.build(story)
    pdf = buffer.getvalue()
    logger.info(f"Rendered {definition.kind} contract for {definition.client_name} ({len(pdf)} bytes)")
    return pdf
