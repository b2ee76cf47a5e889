from create_velocity.cli import main

main()
