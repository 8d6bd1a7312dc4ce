from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Material',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('code', models.CharField(help_text='Internal material code (unique)', max_length=50, unique=True)),
                ('name', models.CharField(help_text='Material name', max_length=100)),
                ('specification', models.TextField(blank=True, help_text='Technical specification')),
                ('unit', models.CharField(blank=True, help_text='Unit of measure (pcs, kg, m...)', max_length=20)),
                ('category', models.CharField(blank=True, help_text='Catalog category', max_length=50)),
            ],
            options={
                'ordering': ['code'],
                'indexes': [models.Index(fields=['category'], name='materials_m_categor_5b7d2e_idx')],
            },
        ),
    ]
