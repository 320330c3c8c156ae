import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404

from .crud import CrudResource
from .models import Setting, AuditLog
from .permissions import access_flags, role_access, user_role
from .serializers import UserSerializer, SettingSerializer, AuditLogSerializer
from .utils import create_audit_log

logger = logging.getLogger(__name__)

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    default_error_messages = {
        'no_active_account': 'Usuário ou senha inválidos',
    }

    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('Conta de usuário desativada.')
        return {
            'user': UserSerializer(self.user).data,
            'token': data['access'],
            'refresh': data['refresh'],
        }

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user_role(user)
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == status.HTTP_200_OK:
            user = response.data['user']
            create_audit_log(request=request, action='login', model_name='User',
                             object_id=user['id'], object_name=user['username'],
                             user=User.objects.filter(pk=user['id']).first())
            logger.info(f"User {user['username']} logged in")
        return response


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token inválido ou expirado.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token inválido. Usuário não existe mais.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([IsAuthenticated, role_access('users', read_action='edit')])
def register(request):
    """Create a login account (admin only)"""
    serializer = UserSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    create_audit_log(request=request, action='create', model_name='User',
                     object_id=user.id, object_name=user.username)
    token = CustomTokenObtainPairSerializer.get_token(user)
    return Response({
        'user': UserSerializer(user).data,
        'token': str(token.access_token),
        'refresh': str(token),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with role and per-resource access flags"""
    user_data = dict(UserSerializer(request.user).data)
    role = user_role(request.user)
    user_data['role'] = role
    user_data['is_admin'] = role == 'admin'
    user_data.update(access_flags(role))
    return Response(user_data)


users = CrudResource(
    name='users',
    model=User,
    serializer_class=UserSerializer,
    access='users',
    invalidates=('users',),
    cache_lists=False,
)


# System settings (key/value)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, role_access('settings')])
def system_setting_list_upsert(request):
    """List all system settings or create/update one by key"""
    if request.method == 'GET':
        serializer = SettingSerializer(Setting.objects.all(), many=True)
        return Response(serializer.data)

    key = request.data.get('key')
    if not key:
        return Response({'message': 'Chave é obrigatória', 'key': ['Este campo é obrigatório.']},
                        status=status.HTTP_400_BAD_REQUEST)
    setting = Setting.objects.filter(key=key).first()
    serializer = SettingSerializer(setting, data=request.data, partial=setting is not None)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_200_OK if setting else status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('settings')])
def system_setting_detail(request, key):
    """Retrieve a system setting by key"""
    setting = get_object_or_404(Setting, key=key)
    return Response(SettingSerializer(setting).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, role_access('users')])
def audit_log_list(request):
    """List audit logs, newest first"""
    logs = AuditLog.objects.select_related('user')
    model_name = request.query_params.get('model_name')
    action = request.query_params.get('action')
    if model_name:
        logs = logs.filter(model_name=model_name)
    if action:
        logs = logs.filter(action=action)
    serializer = AuditLogSerializer(logs[:500], many=True)
    return Response(serializer.data)
