"""
Generic CRUD resources and the entity form lifecycle

Every editable entity (client, employee, event, inventory item, purchase,
transaction, payment, settings records) is described once by a
``CrudResource``: model, serializer, access resource, dependent query sets and
the date field used by list filters. The resource builds the list/create,
detail and form-values views; writes go through ``EntityForm``.

Form lifecycle::

    closed -> editing(new | existing) -> submitting -> closed          (success)
                                                   \\-> editing + error (failure)
"""
import logging
from functools import cached_property

from django.core.cache import cache
from django.core.exceptions import FieldDoesNotExist, ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError
from django.shortcuts import get_object_or_404
from django.urls import path
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.config.exceptions import first_message
from .cache_utils import LIST_CACHE_TTL, invalidate_query_sets, query_set_key
from .dates import FilterSelection, filter_by_date_range
from .permissions import role_access, user_role
from .utils import create_audit_log

logger = logging.getLogger(__name__)

FILTER_PARAMS = ('preset', 'date_from', 'date_to')


class FormBusy(Exception):
    """A submission is already in flight for this form"""


class FormClosed(Exception):
    """The form must be opened before it can be submitted"""


def default_values(serializer):
    """Type-appropriate initial values for every writable field of ``serializer``"""
    model = getattr(getattr(serializer, 'Meta', None), 'model', None)
    values = {}
    for name, field in serializer.fields.items():
        if field.read_only:
            continue

        model_field = None
        if model is not None:
            try:
                model_field = model._meta.get_field(field.source)
            except FieldDoesNotExist:
                model_field = None
        if model_field is not None and model_field.has_default():
            default = model_field.get_default()
            values[name] = field.to_representation(default) if default is not None else None
            continue

        if isinstance(field, serializers.BooleanField):
            values[name] = False
        elif isinstance(field, serializers.IntegerField):
            values[name] = 0
        elif isinstance(field, serializers.DecimalField):
            values[name] = '0.00'
        elif isinstance(field, serializers.FloatField):
            values[name] = 0.0
        elif isinstance(field, (serializers.ManyRelatedField, serializers.ListField, serializers.ListSerializer)):
            values[name] = []
        elif isinstance(field, serializers.ChoiceField):
            values[name] = next(iter(field.choices), None)
        elif isinstance(field, serializers.CharField):
            values[name] = ''
        else:
            values[name] = None
    return values


def _as_drf_error(exc):
    if isinstance(exc, serializers.ValidationError):
        return exc
    if isinstance(exc, DjangoValidationError):
        return serializers.ValidationError(getattr(exc, 'message_dict', None) or exc.messages)
    return serializers.ValidationError({'message': 'Registro em conflito com dados existentes'})


class EntityForm:
    """Create/update dialog state for one entity"""
    CLOSED = 'closed'
    EDITING = 'editing'
    SUBMITTING = 'submitting'

    def __init__(self, resource, request=None):
        self.resource = resource
        self.request = request
        self.state = self.CLOSED
        self.instance = None
        self.error = None
        self.errors = {}
        self.result = None

    @property
    def mode(self):
        return 'existing' if self.instance is not None else 'new'

    def open(self, instance=None):
        """Enter the editing state and return the initial field values"""
        self.instance = instance
        self.state = self.EDITING
        self.error = None
        self.errors = {}
        self.result = None
        return self.initial_values()

    def initial_values(self):
        if self.instance is not None:
            data = self.resource.get_serializer(self.instance, request=self.request).data
            return self.resource.represent(self.request, dict(data))
        return default_values(self.resource.get_serializer(request=self.request))

    def close(self):
        self.state = self.CLOSED
        self.instance = None

    def submit(self, data, partial=False):
        """
        Validate and persist ``data``.

        On success the dependent query sets are invalidated, the form closes
        and the saved instance is returned. On failure the form goes back to
        editing with ``error`` set, nothing is persisted and the validation
        error is raised again for the caller.
        """
        if self.state == self.SUBMITTING:
            raise FormBusy('Envio em andamento')
        if self.state != self.EDITING:
            raise FormClosed('Formulário fechado')

        self.state = self.SUBMITTING
        self.error = None
        self.errors = {}
        created = self.instance is None
        try:
            with transaction.atomic():
                instance = self.resource.save(self.instance, data, self.request, partial=partial)
        except (serializers.ValidationError, DjangoValidationError, IntegrityError) as exc:
            error = _as_drf_error(exc)
            self.state = self.EDITING
            self.errors = error.detail
            self.error = first_message(error.detail) or 'Dados inválidos'
            logger.info(f"{self.resource.name} form rejected: {self.error}")
            raise error from exc
        except Exception:
            self.state = self.EDITING
            self.error = 'Erro inesperado ao salvar'
            raise

        self.result = instance
        self.resource.invalidate()
        create_audit_log(
            request=self.request,
            action='create' if created else 'update',
            model_name=self.resource.model.__name__,
            object_id=instance.pk,
            object_name=str(instance),
            changes=self.resource.audit_changes(data),
        )
        self.close()
        return instance


class CrudResource:
    """
    One editable entity exposed through the REST API.

    Subclasses override the hooks (``get_queryset``, ``perform_save``,
    ``after_save``, ``represent``) to add entity rules.
    """

    def __init__(self, name, model, serializer_class, access, invalidates=(),
                 date_field=None, filterset_class=None, query_set=None,
                 write_action='edit', cache_lists=True):
        self.name = name
        self.model = model
        self.serializer_class = serializer_class
        self.access = access
        self.query_set = query_set or name
        self.invalidates = tuple(invalidates) or (self.query_set,)
        self.date_field = date_field
        self.filterset_class = filterset_class
        self.write_action = write_action
        self.cache_lists = cache_lists

    # Hooks

    def get_queryset(self, request):
        return self.model.objects.all()

    def get_serializer(self, *args, request=None, **kwargs):
        kwargs.setdefault('context', {'request': request})
        return self.serializer_class(*args, **kwargs)

    def represent(self, request, data):
        """Final shape of one serialized record for the requesting user"""
        return data

    def perform_save(self, serializer, request):
        return serializer.save()

    def after_save(self, instance, created, previous, request):
        """Runs inside the save transaction"""

    def perform_destroy(self, instance, request):
        instance.delete()

    def audit_changes(self, data):
        if hasattr(data, 'dict'):
            data = data.dict()
        return {key: value for key, value in dict(data).items() if 'password' not in key}

    # Operations

    def save(self, instance, data, request, partial=False):
        previous = self.snapshot(instance) if instance is not None else None
        serializer = self.get_serializer(instance, data=data, partial=partial, request=request)
        serializer.is_valid(raise_exception=True)
        saved = self.perform_save(serializer, request)
        self.after_save(saved, instance is None, previous, request)
        return saved

    def snapshot(self, instance):
        return {field.attname: getattr(instance, field.attname) for field in instance._meta.concrete_fields}

    def invalidate(self):
        invalidate_query_sets(*self.invalidates)

    def destroy(self, instance, request):
        object_id, object_name = instance.pk, str(instance)
        try:
            with transaction.atomic():
                self.perform_destroy(instance, request)
        except ProtectedError:
            raise serializers.ValidationError({'message': 'Registro em uso por outros cadastros'})
        self.invalidate()
        create_audit_log(request=request, action='delete', model_name=self.model.__name__,
                         object_id=object_id, object_name=object_name)

    def filter_queryset(self, request, queryset, params=None):
        if self.filterset_class is None:
            return queryset
        params = request.query_params if params is None else params
        filterset = self.filterset_class(params, queryset=queryset)
        if not filterset.is_valid():
            raise serializers.ValidationError(filterset.errors)
        return filterset.qs

    def selection(self, request, params=None):
        try:
            return FilterSelection.from_query(request.query_params if params is None else params)
        except ValueError as exc:
            raise serializers.ValidationError({'message': str(exc)})

    def list_data(self, request, params=None):
        """
        Serialized, role-shaped records, cached per user and query, then date filtered

        ``params`` replaces the request query string when the caller serves
        its own parameters next to the list filters.
        """
        params = request.query_params if params is None else params
        selection = self.selection(request, params)
        key_params = sorted((key, value) for key, value in params.items() if key not in FILTER_PARAMS)
        cache_key = query_set_key(self.query_set, 'list', request.user.pk, user_role(request.user), key_params)

        data = cache.get(cache_key) if self.cache_lists else None
        if data is None:
            queryset = self.filter_queryset(request, self.get_queryset(request), params)
            serializer = self.get_serializer(queryset, many=True, request=request)
            data = [self.represent(request, dict(item)) for item in serializer.data]
            if self.cache_lists:
                cache.set(cache_key, data, LIST_CACHE_TTL)

        if self.date_field:
            return filter_by_date_range(data, self.date_field, selection)
        return data

    def get_object(self, request, pk):
        return get_object_or_404(self.get_queryset(request), pk=pk)

    def detail_data(self, request, instance):
        return self.represent(request, dict(self.get_serializer(instance, request=request).data))

    # Views

    def permissions(self, read_action='view'):
        return [IsAuthenticated, role_access(self.access, self.write_action, read_action=read_action)]

    @cached_property
    def list_create_view(self):
        resource = self

        @api_view(['GET', 'POST'])
        @permission_classes(resource.permissions())
        def list_create(request):
            if request.method == 'GET':
                return Response(resource.list_data(request))
            form = EntityForm(resource, request)
            form.open()
            instance = form.submit(request.data)
            return Response(resource.detail_data(request, instance), status=status.HTTP_201_CREATED)

        return list_create

    @cached_property
    def detail_view(self):
        resource = self

        @api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
        @permission_classes(resource.permissions())
        def detail(request, pk):
            instance = resource.get_object(request, pk)
            if request.method == 'GET':
                return Response(resource.detail_data(request, instance))
            elif request.method in ('PUT', 'PATCH'):
                form = EntityForm(resource, request)
                form.open(instance)
                instance = form.submit(request.data, partial=request.method == 'PATCH')
                return Response(resource.detail_data(request, instance))
            else:  # DELETE
                resource.destroy(instance, request)
                return Response(status=status.HTTP_204_NO_CONTENT)

        return detail

    @cached_property
    def form_view(self):
        resource = self

        @api_view(['GET'])
        @permission_classes(resource.permissions(read_action=resource.write_action))
        def form_values(request, pk=None):
            instance = resource.get_object(request, pk) if pk is not None else None
            form = EntityForm(resource, request)
            values = form.open(instance)
            return Response({'mode': form.mode, 'state': form.state, 'values': values})

        return form_values

    def urlpatterns(self, prefix=None):
        prefix = prefix or self.name
        return [
            path(prefix, self.list_create_view, name=f'{self.name}-list-create'),
            path(f'{prefix}/form', self.form_view, name=f'{self.name}-form-new'),
            path(f'{prefix}/<int:pk>', self.detail_view, name=f'{self.name}-detail'),
            path(f'{prefix}/<int:pk>/form', self.form_view, name=f'{self.name}-form-edit'),
        ]
