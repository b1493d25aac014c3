# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── app_shop/        <- Paquete Python
#       ├── main.py      <- create_app()
#       ├── config.py    <- load_config()
#       ├── services/
#       └── repositories/
# ==============================================================================

from app_shop.config import load_config
from app_shop.main import create_app

config = load_config()
app = create_app(config)

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Variable 'app' exportada para Gunicorn:
#   gunicorn wsgi:app
#
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    if not config.debug:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{config.host}:{config.port}")
        print(f"  Acceso local: http://localhost:{config.port}")
        print(f"{'='*50}\n")

    app.run(host=config.host, port=config.port, debug=config.debug)
