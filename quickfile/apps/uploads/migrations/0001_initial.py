import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='FileRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=1024)),
                ('account', models.CharField(max_length=255)),
                ('mime', models.CharField(max_length=255)),
                ('created', models.DateTimeField(default=django.utils.timezone.now)),
                ('expire', models.DateTimeField(blank=True, help_text='Null means the file never expires', null=True)),
                ('bucket', models.CharField(blank=True, default='', help_text='Unlisted bucket; empty for the public listing', max_length=255)),
                ('length', models.BigIntegerField(default=0)),
            ],
            options={
                'verbose_name': 'File record',
                'verbose_name_plural': 'File records',
                'db_table': 'meta',
                'ordering': ['-id'],
                'indexes': [models.Index(fields=['expire', 'bucket', 'account'], name='meta_expire_bucket_account_idx')],
            },
        ),
        migrations.CreateModel(
            name='SchemaVersion',
            fields=[
                ('id', models.PositiveSmallIntegerField(default=1, primary_key=True, serialize=False)),
                ('version', models.PositiveIntegerField()),
            ],
            options={
                'verbose_name': 'Schema version',
                'verbose_name_plural': 'Schema version',
                'db_table': 'schema_version',
            },
        ),
        migrations.CreateModel(
            name='Chunk',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField()),
                ('length', models.PositiveIntegerField()),
                ('data', models.BinaryField()),
                ('file', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='chunks', to='uploads.filerecord')),
            ],
            options={
                'verbose_name': 'Chunk',
                'verbose_name_plural': 'Chunks',
                'db_table': 'chunks',
                'constraints': [models.UniqueConstraint(fields=('file', 'position'), name='chunks_file_position_unique')],
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.TextField()),
                ('file', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='tags', to='uploads.filerecord')),
            ],
            options={
                'verbose_name': 'Tag',
                'verbose_name_plural': 'Tags',
                'db_table': 'tags',
                'indexes': [models.Index(fields=['name'], name='tags_name_idx')],
            },
        ),
    ]
