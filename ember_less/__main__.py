from ember_less.pipeline import main

main()
