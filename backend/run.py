import logging
from config import Config
from tenpercent import create_app, socketio

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
app = create_app()

if __name__ == '__main__':
    app.logger.info(f"TenPercent server running on port {app.config['PORT']}")
    socketio.run(app, host='0.0.0.0', port=app.config['PORT'], allow_unsafe_werkzeug=True)
