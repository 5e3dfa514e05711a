# audio/views.py
import json
import logging

from django.http import FileResponse, JsonResponse
from django.shortcuts import render
from django.urls import reverse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from . import extraction
from .exceptions import ExtractionError, ExtractionTimedOut, InvalidInput, StoredFileNotFound
from .utils import clean_url, new_stored_file, resolve_stored_file

logger = logging.getLogger(__name__)


def error_response(message, status):
    return JsonResponse({'error': message}, status=status)


def get_request_url(request):
    """Read the url field from a JSON body, falling back to form data"""
    if request.content_type == 'application/json':
        try:
            payload = json.loads(request.body or b'{}')
        except ValueError:
            return None
        return payload.get('url') if isinstance(payload, dict) else None
    return request.POST.get('url')


def home(request):
    api_base = reverse('audio:health').rsplit('/', 1)[0]
    return render(request, 'audio/home.html', {'api_base': api_base})


@csrf_exempt
@require_POST
def validate(request):
    try:
        url = clean_url(get_request_url(request))
    except InvalidInput as e:
        return error_response(str(e), 400)

    try:
        metadata = extraction.get_extraction_client().fetch_metadata(url)
    except ExtractionTimedOut as e:
        logger.error(f"Validation timed out for {url}: {e}")
        return error_response('Timed out fetching video information', 504)
    except ExtractionError as e:
        logger.error(f"Validation error for {url}: {e}")
        return error_response('Failed to fetch video information', 400)

    return JsonResponse({'valid': True, **metadata.as_payload()})


@csrf_exempt
@require_POST
def download(request):
    try:
        url = clean_url(get_request_url(request))
    except InvalidInput as e:
        return error_response(str(e), 400)

    client = extraction.get_extraction_client()
    try:
        # /validate may never have been called for this url
        metadata = client.fetch_metadata(url)
        stored = new_stored_file(metadata.title)
        client.download_audio(url, stored.physical_path)
    except ExtractionTimedOut as e:
        logger.error(f"Download timed out for {url}: {e}")
        return error_response(f"Failed to download audio: {e}", 504)
    except (ExtractionError, OSError) as e:
        logger.error(f"Download error for {url}: {e}")
        return error_response(f"Failed to download audio: {e}", 500)

    return JsonResponse({
        'success': True,
        'downloadUrl': f"/file/{stored.file_name}",
        'fileName': stored.display_name,
    })


@require_GET
def serve_file(request, file_name):
    try:
        stored = resolve_stored_file(file_name)
        handle = open(stored.physical_path, 'rb')
    except (StoredFileNotFound, FileNotFoundError):
        # Includes files removed by the retention sweeper in between
        return error_response('File not found', 404)
    except OSError as e:
        logger.error(f"Error opening {file_name}: {e}")
        return error_response('Failed to download file', 500)

    return FileResponse(handle, as_attachment=True, filename=stored.display_name)


@require_GET
def health(request):
    return JsonResponse({'status': 'ok'})
