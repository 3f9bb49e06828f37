from rest_framework import status
from rest_framework.test import APITestCase

from core.factories import make_distributor, make_user
from .models import ContactDetails


class ContactDetailsApiTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.dist_user = make_user('gokul', role='distributor', distributor=make_distributor())
        self.payload = {
            'admin_name': 'Ramesh Patil', 'admin_contact': '98220 11111',
            'admin_email': ' Office@GokulDairy.in ', 'admin_address': 'Plot 4, MIDC, Kolhapur',
            'staff_name': 'Sunil', 'staff_contact': '98220 22222',
        }

    def test_admin_adds_contact_details(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/contact-details/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['admin_email'], 'office@gokuldairy.in')
        self.assertEqual(ContactDetails.objects.count(), 1)

    def test_all_fields_are_required(self):
        self.client.force_authenticate(self.admin)
        payload = dict(self.payload, staff_contact='')
        response = self.client.post('/api/contact-details/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('staff_contact', response.data['detail'])

    def test_staff_and_distributors_read_newest_first(self):
        ContactDetails.objects.create(**dict(self.payload, staff_name='Old Desk'))
        latest = ContactDetails.objects.create(**self.payload)
        for user in (self.staff, self.dist_user):
            self.client.force_authenticate(user)
            response = self.client.get('/api/contact-details/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data[0]['id'], latest.pk)
            self.assertEqual(len(response.data), 2)

    def test_only_admin_writes(self):
        contact = ContactDetails.objects.create(**self.payload)
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/contact-details/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.force_authenticate(self.dist_user)
        response = self.client.delete(f'/api/contact-details/{contact.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_updates_and_deletes(self):
        contact = ContactDetails.objects.create(**self.payload)
        self.client.force_authenticate(self.admin)
        response = self.client.put(f'/api/contact-details/{contact.pk}/',
                                   dict(self.payload, staff_name='Mahesh'), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['staff_name'], 'Mahesh')
        response = self.client.delete(f'/api/contact-details/{contact.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.delete(f'/api/contact-details/{contact.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_anonymous_cannot_read(self):
        response = self.client.get('/api/contact-details/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
