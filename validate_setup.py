"""Validate project setup."""

import os
import sys


def check_file_exists(filepath):
    """Check if a file exists."""
    exists = os.path.exists(filepath)
    status = "✓" if exists else "✗"
    print(f"{status} {filepath}")
    return exists


def main():
    """Validate project structure."""
    print("Validating AI Provider Gateway project setup...\n")

    required_files = [
        "pyproject.toml",
        "README.md",
        ".env.example",
        ".gitignore",
        "run.py",
        "provider_gateway/__init__.py",
        "provider_gateway/main.py",
        "provider_gateway/config.py",
        "provider_gateway/database/__init__.py",
        "provider_gateway/database/database.py",
        "provider_gateway/models/__init__.py",
        "provider_gateway/models/provider.py",
        "provider_gateway/models/model.py",
        "provider_gateway/providers/__init__.py",
        "provider_gateway/providers/base.py",
        "provider_gateway/providers/registry.py",
        "provider_gateway/providers/errors.py",
        "provider_gateway/services/__init__.py",
        "provider_gateway/services/encryption_service.py",
        "provider_gateway/services/provider_service.py",
        "provider_gateway/services/connection_tester.py",
        "provider_gateway/services/model_synchronizer.py",
        "provider_gateway/services/chat_gateway.py",
        "provider_gateway/api/__init__.py",
        "provider_gateway/api/providers.py",
        "provider_gateway/api/models.py",
        "tests/__init__.py",
        "tests/test_setup.py",
    ]

    print("Checking required files:")
    all_exist = all(check_file_exists(f) for f in required_files)

    print("\n" + "="*50)
    if all_exist:
        print("✓ All required files are present!")
        print("\nNext steps:")
        print("1. Create .env file: cp .env.example .env")
        print("2. Generate encryption key:")
        print('   python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"')
        print("3. Update .env with your configuration")
        print('4. Install dependencies: pip install -e ".[test]"')
        print("5. Run the application: python run.py")
        return 0
    else:
        print("✗ Some required files are missing!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
