"""
Test suite for dashboard metrics and the financial report
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status

from backoffice.core.test_utils import AuthenticatedAPIClient, BackofficeTestCase, TestDataFactory
from backoffice.finance.models import FinancialTransaction
from .metrics import dashboard_metrics, financial_summary, upcoming_events


def local(*args):
    return timezone.make_aware(datetime(*args))


class DashboardMetricsTests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.today = date(2026, 3, 18)
        TestDataFactory.create_transaction('receivable', Decimal('500'), is_paid=True, paid_date=date(2026, 3, 10))
        TestDataFactory.create_transaction('payable', Decimal('200'), is_paid=True, paid_date=date(2026, 3, 18))
        TestDataFactory.create_transaction('receivable', Decimal('300'))
        TestDataFactory.create_transaction('receivable', Decimal('100'), is_paid=True, paid_date=date(2026, 1, 15))

    def test_totals(self):
        metrics = dashboard_metrics(self.today)
        self.assertEqual(metrics['cash_balance'], Decimal('400'))
        self.assertEqual(metrics['monthly_revenue'], Decimal('500'))

    def test_revenue_chart_covers_six_months(self):
        chart = dashboard_metrics(self.today)['monthly_revenue_chart']
        self.assertEqual([point['month'] for point in chart], ['out', 'nov', 'dez', 'jan', 'fev', 'mar'])
        self.assertEqual(chart[0]['year'], 2025)
        self.assertEqual(chart[3]['revenue'], Decimal('100'))
        self.assertEqual(chart[5]['revenue'], Decimal('500'))

    def test_cash_flow_chart_covers_seven_days(self):
        chart = dashboard_metrics(self.today)['cash_flow_chart']
        self.assertEqual(len(chart), 7)
        self.assertEqual(chart[0]['date'], '12/03')
        self.assertEqual(chart[-1], {'date': '18/03', 'balance': Decimal('-200')})

    def test_events_and_low_stock(self):
        TestDataFactory.create_event(date=local(2026, 3, 20, 15, 0))
        TestDataFactory.create_event(date=local(2026, 3, 21, 15, 0), status='cancelled')
        TestDataFactory.create_event(date=local(2026, 4, 2, 15, 0))
        TestDataFactory.create_inventory_item(quantity=1, min_quantity=3)
        metrics = dashboard_metrics(self.today)
        self.assertEqual(metrics['events_this_month'], 1)
        self.assertEqual(metrics['low_stock_items'], 1)

    def test_cached_until_data_changes(self):
        self.assertEqual(dashboard_metrics(self.today)['cash_balance'], Decimal('400'))

        # Queryset updates skip model signals, so the cached value survives
        FinancialTransaction.objects.filter(type='payable').update(amount=Decimal('50'))
        self.assertEqual(dashboard_metrics(self.today)['cash_balance'], Decimal('400'))

        TestDataFactory.create_transaction('receivable', Decimal('10'), is_paid=True, paid_date=self.today)
        self.assertEqual(dashboard_metrics(self.today)['cash_balance'], Decimal('560'))


class UpcomingEventsTests(BackofficeTestCase):

    def test_next_scheduled_events(self):
        today = timezone.localdate()
        customer = TestDataFactory.create_client(name='Maria')
        TestDataFactory.create_event(client=customer, title='Ontem', date=timezone.now() - timedelta(days=1))
        TestDataFactory.create_event(client=customer, title='Cancelada', status='cancelled')
        for offset in range(6):
            TestDataFactory.create_event(client=customer, title=f'Festa {offset}',
                                         date=timezone.now() + timedelta(days=offset + 1))

        upcoming = upcoming_events(today)
        self.assertEqual([event['title'] for event in upcoming], [f'Festa {offset}' for offset in range(5)])
        self.assertEqual(upcoming[0]['client_name'], 'Maria')


class FinancialSummaryTests(BackofficeTestCase):

    def test_summary(self):
        rows = [
            {'type': 'receivable', 'amount': '100.00', 'is_paid': True},
            {'type': 'receivable', 'amount': '50.00', 'is_paid': False},
            {'type': 'payable', 'amount': '30.00', 'is_paid': True},
            {'type': 'payable', 'amount': '20.00', 'is_paid': False},
        ]
        self.assertEqual(financial_summary(rows), {
            'receivable': Decimal('150.00'), 'received': Decimal('100.00'),
            'payable': Decimal('50.00'), 'paid': Decimal('30.00'), 'balance': Decimal('70.00'),
        })


class ReportAPITests(BackofficeTestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user(role='admin'))

    def test_dashboard_endpoints(self):
        response = self.client.get('/api/dashboard/metrics')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('cash_balance', response.data)
        self.assertEqual(len(response.data['monthly_revenue_chart']), 6)

        response = self.client.get('/api/dashboard/upcoming-events')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_dashboard_is_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user(role='secretaria'))
        self.assertEqual(self.client.get('/api/dashboard/metrics').status_code, status.HTTP_403_FORBIDDEN)

    def test_financial_report_for_period(self):
        TestDataFactory.create_transaction('receivable', Decimal('100'), due_date=date(2026, 3, 5), is_paid=True)
        TestDataFactory.create_transaction('payable', Decimal('40'), due_date=date(2026, 3, 8))
        TestDataFactory.create_transaction('payable', Decimal('99'), due_date=date(2026, 5, 8))

        response = self.client.get('/api/reports/financial', {'date_from': '2026-03-01', 'date_to': '2026-03-31'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['summary']['received'], Decimal('100.00'))
        self.assertEqual(response.data['summary']['payable'], Decimal('40.00'))

    def test_export_csv(self):
        TestDataFactory.create_transaction('receivable', Decimal('100'), description='Festa Maria')
        response = self.client.get('/api/reports/financial/export')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Type'].startswith('text/csv'))
        self.assertIn('attachment', response['Content-Disposition'])

        lines = response.content.decode('utf-8').splitlines()
        self.assertEqual(lines[0], 'Tipo,Descrição,Valor,Vencimento,Data Pagamento,Pago,Data Cadastro')
        self.assertTrue(lines[1].startswith('A Receber,Festa Maria,100.00,'))
        self.assertIn(',Não,', lines[1])
