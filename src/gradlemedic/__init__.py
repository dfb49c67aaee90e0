"""gradlemedic - build health diagnosis and Gradle migration analysis."""

__version__ = "0.1.0"
