# audio/urls.py
from django.urls import path

from . import views

app_name = 'audio'

urlpatterns = [
    path('validate', views.validate, name='validate'),
    path('download', views.download, name='download'),
    path('file/<str:file_name>', views.serve_file, name='file'),
    path('health', views.health, name='health'),
]
