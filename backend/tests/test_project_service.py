"""Tests for ProjectService orchestration and result envelopes"""

import os
from unittest.mock import patch

import pytest

from repositories import ProjectRepository
from services import ProjectService


@pytest.fixture
def service(conn, uploader):
    return ProjectService(conn, uploader, image_folder='projects', max_images=5)


def _files(image_file, n):
    return [image_file(f'photo{i}.png') for i in range(n)]


def _stored_files(images_dir):
    return os.listdir(images_dir) if os.path.isdir(images_dir) else []


class TestCreateProject:

    def test_requires_title(self, service):
        result = service.create_project({'category': 'residential'})
        assert result == {'success': False, 'message': 'Project title is required', 'error_code': 400}

    def test_requires_category(self, service):
        result = service.create_project({'title': 'Villa'})
        assert result['error_code'] == 400
        assert result['message'] == 'Project category is required'

    def test_rejects_more_than_five_images(self, service, image_file, images_dir):
        result = service.create_project({'title': 'Villa', 'category': 'residential'},
                                        _files(image_file, 6))
        assert result['error_code'] == 400
        assert result['message'] == 'Maximum 5 images allowed per project'
        assert service.projects.count_projects() == 0
        assert _stored_files(images_dir) == []

    def test_rejects_non_text_values(self, service):
        result = service.create_project({'title': 'Villa', 'category': ['residential'], 'project_date': 2024})
        assert result == {
            'success': False, 'message': 'Fields must be text: category, project_date', 'error_code': 400
        }
        assert service.projects.count_projects() == 0

    def test_invalid_completion_status(self, service):
        result = service.create_project({'title': 'Villa', 'category': 'residential',
                                         'completion_status': 'abandoned'})
        assert result['error_code'] == 400
        assert 'completion_status' in result['message']

    def test_with_three_images(self, service, image_file, images_dir):
        result = service.create_project({'title': 'Villa', 'category': 'residential'},
                                        _files(image_file, 3))

        assert result['success'] is True
        assert result['message'] == 'Project created successfully'
        assert result['uploaded_images'] == 3

        images = result['data']['images']
        assert len(images) == 3
        primaries = [i for i in images if i['is_primary']]
        assert len(primaries) == 1
        assert primaries[0]['original_name'] == 'photo0.png'
        assert len(_stored_files(images_dir)) == 3

    def test_strips_markup(self, service):
        result = service.create_project({
            'title': '<b>Villa</b>',
            'category': 'residential',
            'description': 'Sea view <script>alert(1)</script>& garden',
            'location': '<i>Goa</i>',
        })
        data = result['data']
        assert data['title'] == 'Villa'
        assert data['description'] == 'Sea view alert(1)& garden'
        assert data['location'] == 'Goa'

    def test_form_values_coerced(self, service):
        result = service.create_project({
            'title': 'Villa', 'category': 'residential',
            'featured': '1', 'display_order': '4',
        })
        assert result['data']['featured'] is True
        assert result['data']['display_order'] == 4

    def test_invalid_image_skipped(self, service, image_file):
        files = [image_file('good.png'), image_file('bad.png', data=b'not an image')]
        result = service.create_project({'title': 'Villa', 'category': 'residential'}, files)

        assert result['success'] is True
        assert result['uploaded_images'] == 1
        assert result['errors'][0]['file'] == 'bad.png'

    def test_failure_rolls_back_rows_and_files(self, service, image_file, images_dir):
        with patch.object(ProjectRepository, 'add_image', side_effect=RuntimeError('disk full')):
            result = service.create_project({'title': 'Villa', 'category': 'residential'},
                                            _files(image_file, 2))

        assert result == {'success': False, 'message': 'disk full', 'error_code': 500}
        assert service.projects.count_projects() == 0
        assert _stored_files(images_dir) == []


class TestUpdateProject:

    @pytest.fixture
    def project_id(self, service):
        result = service.create_project({
            'title': 'Villa', 'category': 'residential', 'location': 'Pune',
            'featured': 1, 'display_order': 2,
        })
        return result['data']['id']

    def test_not_found(self, service):
        assert service.update_project(404, {'title': 'x'})['error_code'] == 404

    def test_omitted_fields_keep_previous_values(self, service, project_id):
        result = service.update_project(project_id, {'title': 'Villa II'})
        data = result['data']
        assert result['message'] == 'Project updated successfully'
        assert data['title'] == 'Villa II'
        assert data['location'] == 'Pune'
        assert data['featured'] is True
        assert data['display_order'] == 2

    def test_rejects_non_text_values(self, service, project_id):
        result = service.update_project(project_id, {'title': {'en': 'Villa'}})
        assert result['error_code'] == 400
        assert service.get_project(project_id)['data']['title'] == 'Villa'

    def test_capacity_counts_existing_images(self, service, project_id, image_file):
        service.add_images(project_id, _files(image_file, 4))
        result = service.update_project(project_id, {}, _files(image_file, 2))
        assert result['error_code'] == 400
        assert result['message'] == 'Maximum 5 images allowed. Current: 4'

    def test_adds_images(self, service, project_id, image_file):
        result = service.update_project(project_id, {}, _files(image_file, 2))
        assert result['uploaded_images'] == 2
        assert len(result['data']['images']) == 2


class TestImages:

    @pytest.fixture
    def project_id(self, service):
        return service.create_project({'title': 'Villa', 'category': 'residential'})['data']['id']

    def test_add_images_not_found(self, service, image_file):
        assert service.add_images(404, _files(image_file, 1))['error_code'] == 404

    def test_add_images_requires_files(self, service, project_id):
        result = service.add_images(project_id, [])
        assert result['error_code'] == 400
        assert result['message'] == 'No images provided'

    def test_add_images_capacity_message(self, service, project_id, image_file):
        service.add_images(project_id, _files(image_file, 3))
        result = service.add_images(project_id, _files(image_file, 3))
        assert result['error_code'] == 400
        assert result['message'] == 'Maximum 5 images allowed. Current: 3, Attempting to add: 3'

    def test_add_images_returns_persisted(self, service, project_id, image_file):
        result = service.add_images(project_id, _files(image_file, 2))
        assert result['success'] is True
        assert result['message'] == '2 image(s) uploaded successfully'
        assert [set(item) for item in result['data']] == [{'id', 'filename', 'url'}] * 2

    def test_add_oversized_image(self, service, project_id, image_file, images_dir):
        big = image_file('huge.png', data=b'\x89PNG\r\n\x1a\n' + b'\0' * (6 * 1024 * 1024))
        result = service.add_images(project_id, [big])

        assert result['success'] is False
        assert result['error_code'] == 400
        assert 'exceeds maximum allowed' in result['message']
        assert service.projects.image_count(project_id) == 0
        assert _stored_files(images_dir) == []

    def test_delete_image(self, service, project_id, image_file):
        image_id = service.add_images(project_id, _files(image_file, 1))['data'][0]['id']
        assert service.delete_image(image_id) == {
            'success': True, 'message': 'Image deleted successfully', 'data': None
        }
        assert service.delete_image(image_id)['error_code'] == 404

    def test_set_primary_image(self, service, project_id, image_file):
        uploaded = service.add_images(project_id, _files(image_file, 3))['data']
        result = service.set_primary_image(project_id, uploaded[2]['id'])
        assert result['success'] is True

        images = service.get_project(project_id)['data']['images']
        assert images[0]['id'] == uploaded[2]['id']
        assert [i['is_primary'] for i in images] == [True, False, False]

    def test_set_primary_database_error(self, service, project_id):
        with patch.object(ProjectRepository, 'set_primary_image', side_effect=RuntimeError('locked')):
            result = service.set_primary_image(project_id, 1)
        assert result['error_code'] == 500


class TestReadsAndDelete:

    def test_get_all_projects_envelope(self, service):
        for title, category in [('A', 'commercial'), ('B', 'commercial'), ('C', 'residential')]:
            service.create_project({'title': title, 'category': category})

        result = service.get_all_projects({'category': 'commercial', 'limit': '1'})
        assert result['total'] == 2
        assert result['count'] == 1
        assert result['data'][0]['category'] == 'commercial'

    def test_get_project_not_found(self, service):
        assert service.get_project(1)['error_code'] == 404

    def test_featured_default_limit(self, service):
        for n in range(8):
            service.create_project({'title': f'P{n}', 'category': 'residential', 'featured': 'true'})
        assert service.get_featured_projects()['count'] == 6
        assert service.get_featured_projects('2')['count'] == 2

    def test_delete_project(self, service, image_file, images_dir):
        project_id = service.create_project({'title': 'Villa', 'category': 'residential'},
                                            _files(image_file, 2))['data']['id']

        result = service.delete_project(project_id)
        assert result['message'] == 'Project deleted successfully'
        assert service.get_project(project_id)['error_code'] == 404
        assert _stored_files(images_dir) == []

    def test_delete_missing_project(self, service):
        assert service.delete_project(77)['error_code'] == 404
