from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CollectionSnapshot",
            fields=[
                ("key", models.CharField(max_length=128, primary_key=True, serialize=False)),
                ("payload", models.JSONField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "pos_collection_snapshots",
                "ordering": ["key"],
            },
        ),
    ]
