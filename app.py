from transitrouting.api import create_app
from transitrouting.config import config

# Initialize Flask App (reads the document named by CATALOGUE_INPUT)
config.validate()
app = create_app()

if __name__ == '__main__':
    api_config = config.get_api_config()
    print(f"\n🚀 Transit catalogue running at: http://{api_config['host']}:{api_config['port']}\n")
    app.run(**api_config)
