import os
from uaengine import create_app

app = create_app()

if __name__ == '__main__':
    # Reloader follows the debug switch: UAENGINE_DEBUG_SERVER=1
    debug_flag = os.environ.get('UAENGINE_DEBUG_SERVER', '0') == '1'
    port = int(os.environ.get('UAENGINE_PORT', '5000'))
    app.run(host='0.0.0.0', port=port, debug=debug_flag, use_reloader=debug_flag)
