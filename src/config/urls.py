"""
URL Configuration do Gerenciador de Chaves PIX.

Estrutura:
- /api/pix/ - API JSON de chaves PIX
- /health/ - Liveness check
"""

from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('api/pix/', include('src.adapters.django_app.pix.urls')),

    path('health/', health, name='health'),
]
