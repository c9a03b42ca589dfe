from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("scoring", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="userprogress",
            name="reset_after_id",
            field=models.BigIntegerField(blank=True, null=True),
        ),
    ]
