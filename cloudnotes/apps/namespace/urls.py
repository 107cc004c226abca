"""URL mapping for the namespace JSON API."""

from django.urls import path

from cloudnotes.apps.namespace import views

app_name = 'namespace'

urlpatterns = [
    path('folders/', views.folder_collection, name='folder-list'),
    path(
        'folders/<int:folder_id>/',
        views.folder_detail,
        name='folder-detail',
    ),
    path('files/', views.file_collection, name='file-list'),
    path('files/<int:file_id>/', views.file_detail, name='file-detail'),
    path('tree/', views.tree, name='tree'),
]
