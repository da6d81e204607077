"""
URL patterns da API PIX (montadas em /api/pix/).

- GET/POST /            - Consulta por filtros / registro
- GET      /contas/<agencia>/<conta>/resumo/ - Resumo da conta
- GET/PUT/DELETE /<id>/ - Consulta por id / alteração / inativação
"""

from django.urls import path

from . import api_views

app_name = 'pix'

urlpatterns = [
    path('', api_views.ChavePixAPIListView.as_view(), name='api_list'),

    # Antes do <pk> para não conflitar
    path(
        'contas/<int:agencia>/<int:conta>/resumo/',
        api_views.ChavePixAPIResumoContaView.as_view(),
        name='api_resumo_conta',
    ),

    path('<str:pk>/', api_views.ChavePixAPIDetailView.as_view(), name='api_detail'),
]
