# tubeaudio/urls.py
from django.urls import include, path

from audio import views

urlpatterns = [
    path('', views.home, name='home'),
    path('api/', include('audio.urls')),
]
