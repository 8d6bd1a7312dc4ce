# apps/materials/tests/test_models.py
from django.db import IntegrityError
from django.test import TestCase

from apps.materials.models import Material, material_exists


class MaterialModelTests(TestCase):

    def test_code_is_unique(self):
        Material.objects.create(code='BJ-001', name='Precision Bearing')
        with self.assertRaises(IntegrityError):
            Material.objects.create(code='BJ-001', name='Another Bearing')

    def test_material_exists(self):
        material = Material.objects.create(code='DJ-002', name='Motor', unit='unit')
        self.assertTrue(material_exists(material.pk))
        self.assertFalse(material_exists(material.pk + 1000))

    def test_str(self):
        self.assertEqual(str(Material(code='DL-003', name='Cable')), 'DL-003 - Cable')
